"""
Firebase bootstrap.

The configuration is read once during application start (see
``CoreConfig.ready``). Missing keys abort startup with a
``ConfigurationError`` before any Firebase handle is created; the resulting
``FirebaseClients`` are handed to their consumers explicitly.
"""
import logging
from dataclasses import dataclass, fields
from functools import cached_property

import firebase_admin
from firebase_admin import auth, firestore

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FIREBASE_ENV_KEYS = {
    'api_key': 'REACT_APP_FIREBASE_API_KEY',
    'auth_domain': 'REACT_APP_FIREBASE_AUTH_DOMAIN',
    'project_id': 'REACT_APP_FIREBASE_PROJECT_ID',
    'storage_bucket': 'REACT_APP_FIREBASE_STORAGE_BUCKET',
    'messaging_sender_id': 'REACT_APP_FIREBASE_MESSAGING_SENDER_ID',
    'app_id': 'REACT_APP_FIREBASE_APP_ID',
}


@dataclass(frozen=True)
class FirebaseConfig:
    api_key: str
    auth_domain: str
    project_id: str
    storage_bucket: str
    messaging_sender_id: str
    app_id: str

    def app_options(self):
        return {
            'projectId': self.project_id,
            'storageBucket': self.storage_bucket,
        }


def load_firebase_config(environ):
    """
    Build a FirebaseConfig from an environment mapping.

    Every key must be present and non-blank; otherwise ConfigurationError is
    raised listing all missing variables.
    """
    values = {}
    missing = []
    for attr, env_name in FIREBASE_ENV_KEYS.items():
        value = environ.get(env_name)
        if value is None or not str(value).strip():
            missing.append(env_name)
        else:
            values[attr] = str(value).strip()

    if missing:
        raise ConfigurationError(
            f"Missing Firebase configuration: {', '.join(missing)}",
            missing=missing,
        )
    return FirebaseConfig(**values)


class FirebaseAuthClient:
    """Auth operations bound to one Firebase app"""

    def __init__(self, app):
        self.app = app

    def verify_id_token(self, id_token, check_revoked=False):
        return auth.verify_id_token(id_token, app=self.app, check_revoked=check_revoked)

    def create_user(self, email, password, display_name=None):
        """Create the Firebase account; returns its uid"""
        record = auth.create_user(email=email, password=password, display_name=display_name, app=self.app)
        return record.uid


class FirebaseClients:
    """Long-lived handles for the process: the app, its auth client and Firestore"""

    def __init__(self, app):
        self.app = app
        self.auth = FirebaseAuthClient(app)

    @cached_property
    def firestore(self):
        return firestore.client(app=self.app)


def init_firebase(config, name='[DEFAULT]'):
    """Create the Firebase app for ``config``; call once per process"""
    if not isinstance(config, FirebaseConfig):
        raise ConfigurationError(f"Expected FirebaseConfig, got {type(config).__name__}")
    for field in fields(config):
        if not getattr(config, field.name):
            raise ConfigurationError(f"Firebase configuration value '{field.name}' is empty",
                                     missing=[FIREBASE_ENV_KEYS[field.name]])

    app = firebase_admin.initialize_app(options=config.app_options(), name=name)
    logger.info(f"Firebase initialized for project {config.project_id}")
    return FirebaseClients(app)
