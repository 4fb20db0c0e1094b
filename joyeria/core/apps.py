import os

from django.apps import AppConfig
from django.conf import settings


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'joyeria.core'
    label = 'core'

    # Set once by ready() when Firebase is enabled
    firebase = None

    def ready(self):
        """Build the Firebase handles once; a misconfiguration aborts startup"""
        if getattr(settings, 'FIREBASE_ENABLED', False):
            from .firebase import init_firebase, load_firebase_config

            self.firebase = init_firebase(load_firebase_config(os.environ))


def firebase_clients():
    """Return the FirebaseClients built at startup, or None when disabled"""
    from django.apps import apps

    return apps.get_app_config('core').firebase
