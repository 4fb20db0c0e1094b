"""
Error taxonomy shared by the API and the maintenance commands.

API errors are DRF ``APIException`` subclasses so views can simply raise
them; ``api_exception_handler`` renders every error in the
``{"success": false, "message": ...}`` envelope the frontend expects.
"""
import logging

from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError as DjangoDatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ConfigurationError(ImproperlyConfigured):
    """Required configuration is missing; raised at startup and never caught"""

    def __init__(self, message, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])


class JoyeriaAPIError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Solicitud inválida'
    default_code = 'error'

    def __init__(self, detail=None, code=None, **extra):
        super().__init__(detail, code)
        self.extra = extra


class ValidationError(JoyeriaAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Datos inválidos'
    default_code = 'validation_error'


class UnauthorizedError(JoyeriaAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'No autorizado'
    default_code = 'unauthorized'


class SessionExpiredError(UnauthorizedError):
    default_detail = 'Sesión expirada por inactividad. Por favor, inicia sesión nuevamente.'
    default_code = 'session_expired'

    def __init__(self, detail=None, code=None, **extra):
        extra.setdefault('expired', True)
        super().__init__(detail, code, **extra)


class NotFoundError(JoyeriaAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Recurso no encontrado'
    default_code = 'not_found'


class AccountLockedError(JoyeriaAPIError):
    status_code = status.HTTP_423_LOCKED
    default_detail = 'Cuenta bloqueada temporalmente'
    default_code = 'account_locked'

    def __init__(self, detail=None, code=None, **extra):
        extra.setdefault('locked', True)
        super().__init__(detail, code, **extra)


class TooManyAttemptsError(JoyeriaAPIError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = 'Demasiados intentos'
    default_code = 'too_many_attempts'

    def __init__(self, detail=None, code=None, **extra):
        extra.setdefault('blocked', True)
        super().__init__(detail, code, **extra)


class DatabaseError(JoyeriaAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Error interno del servidor'
    default_code = 'database_error'


def _first_message(detail):
    """Pick a human readable message out of a DRF error detail structure"""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if message:
                return message if field == 'non_field_errors' else f'{field}: {message}'
        return None
    if isinstance(detail, (list, tuple)):
        for value in detail:
            message = _first_message(value)
            if message:
                return message
        return None
    return str(detail) if detail else None


def api_exception_handler(exc, context):
    """REST_FRAMEWORK['EXCEPTION_HANDLER'] for the whole project"""
    if isinstance(exc, DjangoDatabaseError):
        view = context.get('view')
        logger.exception(f"Database error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        exc = DatabaseError()

    response = exception_handler(exc, context)
    if response is None:
        return None

    body = {'success': False}
    if isinstance(exc, DRFValidationError):
        body['message'] = _first_message(exc.detail) or ValidationError.default_detail
        body['errors'] = exc.detail
    else:
        body['message'] = _first_message(getattr(exc, 'detail', None)) or str(exc)

    if isinstance(exc, JoyeriaAPIError) and exc.extra:
        body.update(exc.extra)

    return Response(body, status=response.status_code, headers=_auth_headers(response))


def _auth_headers(response):
    headers = {}
    for name in ('WWW-Authenticate', 'Retry-After'):
        if name in response:
            headers[name] = response[name]
    return headers
