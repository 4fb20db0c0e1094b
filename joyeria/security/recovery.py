"""
Password-recovery throttling kept on the ``usuarios`` row.

Wrong security answers count against the user; reaching
RECOVERY_MAX_ATTEMPTS blocks recovery for RECOVERY_LOCK_MINUTES. While
blocked, further attempts are refused without being counted. A
successful answer clears the counter.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from joyeria.core.exceptions import TooManyAttemptsError

from .throttle import LockStatus, lock_status

logger = logging.getLogger(__name__)

User = get_user_model()


def recovery_limit() -> int:
    return settings.RECOVERY_MAX_ATTEMPTS


def recovery_lock_duration() -> timedelta:
    return timedelta(minutes=settings.RECOVERY_LOCK_MINUTES)


def get_recovery_status(user) -> LockStatus:
    return lock_status(user.recovery_attempts, user.recovery_blocked_until, timezone.now(), recovery_limit())


def blocked_error(status):
    minutes = status.remaining_minutes
    return TooManyAttemptsError(
        f'Demasiados intentos. Intente en {minutes} min.',
        remainingTime=minutes,
    )


def ensure_recovery_allowed(user) -> LockStatus:
    """Raise TooManyAttemptsError while the user's recovery is blocked"""
    status = get_recovery_status(user)
    if status.locked:
        raise blocked_error(status)
    return status


def register_failed_recovery(user) -> LockStatus:
    """Count a wrong answer under a row lock; block once the limit is reached"""
    now = timezone.now()
    with transaction.atomic():
        locked_user = User.objects.select_for_update().get(pk=user.pk)

        current = lock_status(
            locked_user.recovery_attempts, locked_user.recovery_blocked_until, now, recovery_limit())
        if current.locked:
            return current

        attempts = current.attempts + 1
        locked_user.recovery_attempts = attempts
        locked_user.last_recovery_attempt = now
        locked_user.recovery_blocked_until = None

        just_locked = attempts >= recovery_limit()
        if just_locked:
            locked_user.recovery_blocked_until = now + recovery_lock_duration()
            logger.warning(f"Password recovery blocked for user {user.pk} "
                           f"for {settings.RECOVERY_LOCK_MINUTES} minutes")

        locked_user.save(update_fields=['recovery_attempts', 'last_recovery_attempt', 'recovery_blocked_until'])

    return LockStatus(
        locked=just_locked,
        attempts=attempts,
        remaining_attempts=max(0, recovery_limit() - attempts),
        locked_until=locked_user.recovery_blocked_until,
        just_locked=just_locked,
    )


def reset_recovery_attempts(user) -> None:
    User.objects.filter(pk=user.pk).update(
        recovery_attempts=0,
        last_recovery_attempt=None,
        recovery_blocked_until=None,
    )
