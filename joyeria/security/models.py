from django.conf import settings
from django.db import models
from django.utils import timezone

from joyeria.core.timestamps import as_aware


class SecurityQuestion(models.Model):
    """Challenge/response pair used to recover a password; one per user"""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='security_question')
    question_text = models.CharField(max_length=500)
    answer_hash = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} - {self.question_text}"

    class Meta:
        db_table = 'security_questions'
        indexes = [
            models.Index(fields=['user'], name='idx_security_questions_user_id'),
        ]


class LoginSecurity(models.Model):
    """Failed login counter and lockout window for one email"""
    email = models.CharField(max_length=255, unique=True)
    login_attempts = models.IntegerField(default=0)
    last_login_attempt = models.DateTimeField(null=True, blank=True)
    login_blocked_until = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.email} ({self.login_attempts})"

    def is_locked(self, now=None):
        now = now or timezone.now()
        return bool(self.login_blocked_until and as_aware(self.login_blocked_until) > now)

    class Meta:
        db_table = 'login_security'
        verbose_name_plural = 'login security'
        indexes = [
            models.Index(fields=['email'], name='idx_login_security_email'),
            models.Index(fields=['login_blocked_until'], name='idx_login_security_blocked'),
        ]


class LoginAttempt(models.Model):
    """Audit trail of login attempts"""
    email = models.CharField(max_length=255)
    ip_address = models.CharField(max_length=45)
    user_agent = models.TextField(blank=True, default='')
    attempt_time = models.DateTimeField(auto_now_add=True)
    success = models.BooleanField()
    failure_reason = models.CharField(max_length=100, null=True, blank=True)

    def __str__(self):
        outcome = 'ok' if self.success else (self.failure_reason or 'failed')
        return f"{self.email} @ {self.attempt_time:%Y-%m-%d %H:%M} [{outcome}]"

    class Meta:
        db_table = 'login_attempts'
        ordering = ['-attempt_time']
        indexes = [
            models.Index(fields=['email'], name='idx_login_attempts_email'),
            models.Index(fields=['attempt_time'], name='idx_login_attempts_time'),
        ]
