"""
Email/password login guarded by input screening and the lockout counter.
"""
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.tokens import RefreshToken

from joyeria.core.exceptions import AccountLockedError, UnauthorizedError, ValidationError

from .throttle import (
    clear_failed_attempts, get_lock_status, normalize_email,
    record_login_attempt, register_failed_attempt,
)
from .validators import check_email_security, check_password_security

logger = logging.getLogger(__name__)

User = get_user_model()

INVALID_CREDENTIALS = 'Email o contraseña incorrectos.'


def issue_tokens(user):
    """JWT pair with the claims the frontend reads"""
    refresh = RefreshToken.for_user(user)
    refresh['email'] = user.email
    refresh['is_staff'] = user.is_staff
    return {
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }


def _locked_error(status):
    minutes = status.remaining_minutes
    return AccountLockedError(
        f'🔒 Cuenta bloqueada. Intenta en {minutes} min.',
        lockedUntil=status.locked_until,
        remainingMinutes=minutes,
    )


def _find_user(email):
    return User.objects.filter(email__iexact=email).first()


def login(email, password, ip_address=None, user_agent=''):
    """
    Authenticate by email and password.

    Returns ``(user, tokens)``. Raises ValidationError for hostile input,
    AccountLockedError while the email is locked (or when this failure locks
    it) and UnauthorizedError for wrong credentials.
    """
    problem = check_email_security(email) or check_password_security(password)
    if problem:
        logger.warning(f"Rejected login input from {ip_address}: {problem}")
        raise ValidationError(problem)

    email = normalize_email(email)

    status = get_lock_status(email)
    if status.locked:
        record_login_attempt(email, ip_address, user_agent, success=False, failure_reason='account_locked')
        raise _locked_error(status)

    user = _find_user(email)
    if user is None or not user.is_active or not user.check_password(password):
        status = register_failed_attempt(email)
        record_login_attempt(email, ip_address, user_agent, success=False, failure_reason='invalid_credentials')
        if status.locked:
            raise _locked_error(status)
        raise UnauthorizedError(
            INVALID_CREDENTIALS,
            remainingAttempts=status.remaining_attempts,
        )

    clear_failed_attempts(email)
    record_login_attempt(email, ip_address, user_agent, success=True)
    update_last_login(None, user)
    user.touch_activity()
    logger.info(f"Login successful for user {user.pk}")
    return user, issue_tokens(user)
