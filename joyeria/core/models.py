from datetime import timedelta

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .timestamps import as_aware


class User(AbstractUser):
    """Store customer or staff account, stored in the legacy ``usuarios`` table"""
    email = models.EmailField(unique=True)
    firebase_uid = models.CharField(max_length=128, unique=True, blank=True, null=True)
    is_active = models.BooleanField(default=True, db_column='activo')
    last_activity = models.DateTimeField(default=timezone.now, null=True, blank=True)
    # Password recovery throttle
    recovery_attempts = models.PositiveIntegerField(default=0)
    last_recovery_attempt = models.DateTimeField(null=True, blank=True)
    recovery_blocked_until = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuarios'
        indexes = [
            models.Index(
                fields=['last_activity'],
                name='idx_usuarios_last_activity',
                condition=Q(is_active=True),
            ),
            models.Index(fields=['recovery_blocked_until'], name='idx_usuarios_recovery_blocked'),
        ]

    def __str__(self):
        return self.email or self.username

    def touch_activity(self, now=None):
        """Record that the user just did something"""
        self.last_activity = now or timezone.now()
        User.objects.filter(pk=self.pk).update(last_activity=self.last_activity)

    def is_inactive_for(self, minutes, now=None):
        """True when no activity was recorded within the last ``minutes``"""
        if not self.last_activity:
            return True
        now = now or timezone.now()
        return now - as_aware(self.last_activity) > timedelta(minutes=minutes)
