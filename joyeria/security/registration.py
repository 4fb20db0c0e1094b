"""
Customer self-registration.

When Firebase is enabled the account is created there first and its uid is
stored on the local row, so Firebase ID tokens resolve to the same user.
"""
import logging

from firebase_admin import auth as firebase_auth

from joyeria.core.apps import firebase_clients
from joyeria.core.exceptions import ValidationError

from .login import issue_tokens

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = 'El email ya está registrado'


def register_user(serializer):
    """Save a validated UserCreateSerializer; returns ``(user, tokens)``"""
    data = serializer.validated_data
    firebase_uid = None

    clients = firebase_clients()
    if clients is not None:
        try:
            firebase_uid = clients.auth.create_user(
                data['email'], data['password'], display_name=data['first_name'])
        except firebase_auth.EmailAlreadyExistsError:
            raise ValidationError(DUPLICATE_EMAIL)

    user = serializer.save(firebase_uid=firebase_uid)
    user.touch_activity()
    logger.info(f"User {user.pk} registered")
    return user, issue_tokens(user)
