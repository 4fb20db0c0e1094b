import logging

from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions

from .apps import firebase_clients

logger = logging.getLogger(__name__)

User = get_user_model()


class FirebaseAuthentication(authentication.BaseAuthentication):
    """
    Authenticate ``Authorization: Firebase <id-token>`` headers.

    The token's uid is matched against ``usuarios.firebase_uid``. The
    Firebase handles default to the ones built at startup; pass ``clients``
    to use another set.
    """
    keyword = 'Firebase'

    def __init__(self, clients=None):
        self._clients = clients

    @property
    def clients(self):
        return self._clients if self._clients is not None else firebase_clients()

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed('Cabecera de autorización Firebase inválida.')

        clients = self.clients
        if clients is None:
            # Firebase disabled for this deployment
            return None

        try:
            token = header[1].decode()
            decoded = clients.auth.verify_id_token(token)
        except Exception as e:
            logger.warning(f"Firebase token rejected: {e}")
            raise exceptions.AuthenticationFailed('Token de Firebase inválido o expirado.')

        uid = decoded.get('uid')
        user = User.objects.filter(firebase_uid=uid, is_active=True).first()
        if user is None:
            raise exceptions.AuthenticationFailed('Usuario no registrado.')
        return (user, decoded)

    def authenticate_header(self, request):
        return self.keyword
