"""
Login throttling backed by the ``login_security`` table.

A failed login increments the per-email counter; reaching
LOGIN_MAX_ATTEMPTS blocks the email for LOGIN_LOCK_MINUTES. The
increment-and-check runs in one transaction holding a row lock, so
concurrent failures for the same email are serialized.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from joyeria.core.timestamps import as_aware

from .models import LoginAttempt, LoginSecurity

logger = logging.getLogger(__name__)


def max_attempts() -> int:
    return settings.LOGIN_MAX_ATTEMPTS


def lock_duration() -> timedelta:
    return timedelta(minutes=settings.LOGIN_LOCK_MINUTES)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


@dataclass
class LockStatus:
    locked: bool
    attempts: int
    remaining_attempts: int
    locked_until: Optional[datetime] = None
    just_locked: bool = False

    @property
    def remaining_minutes(self) -> int:
        if not self.locked_until:
            return 0
        seconds = (as_aware(self.locked_until) - timezone.now()).total_seconds()
        return max(1, int(-(-seconds // 60)))


def lock_status(attempts, blocked_until, now, limit) -> LockStatus:
    """Interpret an attempt counter and its block deadline at ``now``"""
    blocked_until = as_aware(blocked_until)
    if blocked_until and blocked_until > now:
        return LockStatus(
            locked=True,
            attempts=attempts,
            remaining_attempts=0,
            locked_until=blocked_until,
        )
    if blocked_until:
        # Lock expired: the counter starts over
        return LockStatus(locked=False, attempts=0, remaining_attempts=limit)
    attempts = attempts or 0
    return LockStatus(
        locked=False,
        attempts=attempts,
        remaining_attempts=max(0, limit - attempts),
    )


def _status_for(record, now) -> LockStatus:
    if record is None:
        return LockStatus(locked=False, attempts=0, remaining_attempts=max_attempts())
    return lock_status(record.login_attempts, record.login_blocked_until, now, max_attempts())


def get_lock_status(email) -> LockStatus:
    """Current throttling state for ``email``"""
    record = LoginSecurity.objects.filter(email=normalize_email(email)).first()
    return _status_for(record, timezone.now())


def register_failed_attempt(email) -> LockStatus:
    """
    Count a failed login for ``email`` and lock it once the limit is reached.

    Already-locked emails are returned unchanged; the lock window is not
    extended by further attempts.
    """
    email = normalize_email(email)
    now = timezone.now()
    with transaction.atomic():
        LoginSecurity.objects.get_or_create(email=email)
        record = LoginSecurity.objects.select_for_update().get(email=email)

        current = _status_for(record, now)
        if current.locked:
            return current

        attempts = current.attempts + 1
        record.login_attempts = attempts
        record.last_login_attempt = now
        record.login_blocked_until = None

        just_locked = attempts >= max_attempts()
        if just_locked:
            record.login_blocked_until = now + lock_duration()
            logger.warning(f"Account locked: {email} for {settings.LOGIN_LOCK_MINUTES} minutes")

        record.save(update_fields=['login_attempts', 'last_login_attempt', 'login_blocked_until', 'updated_at'])

    return LockStatus(
        locked=just_locked,
        attempts=attempts,
        remaining_attempts=max(0, max_attempts() - attempts),
        locked_until=record.login_blocked_until,
        just_locked=just_locked,
    )


def clear_failed_attempts(email) -> None:
    """Forget the counter after a successful login or password reset"""
    LoginSecurity.objects.filter(email=normalize_email(email)).delete()


def cleanup_expired_locks() -> int:
    """Delete records whose lock window has passed; returns how many"""
    deleted, _ = LoginSecurity.objects.filter(login_blocked_until__lt=timezone.now()).delete()
    if deleted:
        logger.info(f"Cleaned up {deleted} expired login locks")
    return deleted


def record_login_attempt(email, ip_address, user_agent='', success=False, failure_reason=None):
    """Append an audit row; an audit failure never breaks the login flow"""
    try:
        LoginAttempt.objects.create(
            email=normalize_email(email),
            ip_address=(ip_address or 'unknown')[:45],
            user_agent=user_agent or '',
            success=success,
            failure_reason=failure_reason,
        )
    except Exception as e:
        logger.error(f"Failed to record login attempt for {email}: {e}")
