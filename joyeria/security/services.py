"""
Security-question password recovery.

Answers are trimmed and stored with Django's password hasher; the clear
answer and the hash never leave this module.
"""
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from joyeria.core.exceptions import NotFoundError, UnauthorizedError, ValidationError

from . import recovery
from .models import SecurityQuestion
from .throttle import clear_failed_attempts
from .validators import sanitize_input

logger = logging.getLogger(__name__)

User = get_user_model()

# Order matters: clients select a question by its index
SECURE_QUESTIONS = (
    "¿Cuál era el nombre de tu primera mascota?",
    "¿En qué ciudad conociste a tu mejor amigo/a?",
    "¿Cuál es el nombre de tu profesor favorito de la primaria?",
    "¿Cuál era tu comida favorita en la infancia?",
    "¿Cuál es el nombre del hospital donde naciste?",
)

CUSTOM_QUESTION_TYPE = 'custom'
CUSTOM_QUESTION_MIN_LENGTH = 5
CUSTOM_QUESTION_MAX_LENGTH = 200
ANSWER_MIN_LENGTH = 2
ANSWER_MAX_LENGTH = 100


def list_secure_questions():
    return list(SECURE_QUESTIONS)


def resolve_question_text(question_type, custom_question=None):
    """Turn a catalog index ("0".."4") or "custom" + text into the question to store"""
    question_type = str(question_type).strip() if question_type is not None else ''

    if question_type == CUSTOM_QUESTION_TYPE:
        text = sanitize_input(custom_question)
        if not text:
            raise ValidationError('Tipo de pregunta no válido')
        if len(text) < CUSTOM_QUESTION_MIN_LENGTH:
            raise ValidationError(
                f'La pregunta personalizada debe tener al menos {CUSTOM_QUESTION_MIN_LENGTH} caracteres')
        if len(text) > CUSTOM_QUESTION_MAX_LENGTH:
            raise ValidationError(
                f'La pregunta personalizada no puede tener más de {CUSTOM_QUESTION_MAX_LENGTH} caracteres')
        return text

    if question_type.isdigit() and int(question_type) < len(SECURE_QUESTIONS):
        return SECURE_QUESTIONS[int(question_type)]

    raise ValidationError('Tipo de pregunta no válido')


def clean_answer(answer):
    text = (answer or '').strip()
    if len(text) < ANSWER_MIN_LENGTH:
        raise ValidationError(f'La respuesta debe tener al menos {ANSWER_MIN_LENGTH} caracteres')
    if len(text) > ANSWER_MAX_LENGTH:
        raise ValidationError(f'La respuesta no puede tener más de {ANSWER_MAX_LENGTH} caracteres')
    return text


def find_active_user(user_id=None, email=None):
    """Look up an active user by id or email; NotFoundError if there is none"""
    queryset = User.objects.filter(is_active=True)
    user = None
    if user_id not in (None, ''):
        user = queryset.filter(pk=user_id).first()
    elif email:
        user = queryset.filter(email__iexact=email.strip()).first()
    if user is None:
        raise NotFoundError('Usuario no encontrado')
    return user


def set_security_question(email, question_type, answer, custom_question=None):
    """Create or replace the user's security question"""
    question_text = resolve_question_text(question_type, custom_question)
    answer = clean_answer(answer)
    user = find_active_user(email=email)

    security_question, created = SecurityQuestion.objects.update_or_create(
        user=user,
        defaults={
            'question_text': question_text,
            'answer_hash': make_password(answer),
        },
    )
    logger.info(f"Security question {'created' if created else 'updated'} for user {user.pk}")
    return security_question


def get_security_question(email):
    """Return ``{'question', 'userId'}`` for display before verification"""
    security_question = (
        SecurityQuestion.objects
        .select_related('user')
        .filter(user__email__iexact=(email or '').strip(), user__is_active=True)
        .first()
    )
    if security_question is None:
        raise NotFoundError('No se encontró pregunta secreta para este usuario')
    return {
        'question': security_question.question_text,
        'userId': security_question.user_id,
    }


def verify_security_answer(answer, user_id=None, email=None):
    """
    Check ``answer`` against the stored hash.

    Returns the verified SecurityQuestion; raises UnauthorizedError on a wrong
    answer or when the user has no question configured, and
    TooManyAttemptsError while recovery is blocked for the user.
    """
    try:
        user = find_active_user(user_id=user_id, email=email)
    except NotFoundError:
        raise UnauthorizedError('Respuesta incorrecta')

    recovery.ensure_recovery_allowed(user)

    security_question = SecurityQuestion.objects.filter(user=user).first()
    if security_question is None:
        raise UnauthorizedError('Respuesta incorrecta')

    if not check_password((answer or '').strip(), security_question.answer_hash):
        logger.info(f"Security answer rejected for user {user.pk}")
        status = recovery.register_failed_recovery(user)
        if status.locked:
            raise recovery.blocked_error(status)
        raise UnauthorizedError('Respuesta incorrecta', remainingAttempts=status.remaining_attempts)

    recovery.reset_recovery_attempts(user)
    return security_question


def reset_password_with_security_question(answer, new_password, user_id=None, email=None):
    """Verify the answer, then replace the user's password"""
    if not new_password:
        raise ValidationError('La nueva contraseña es requerida')

    security_question = verify_security_answer(answer, user_id=user_id, email=email)
    user = security_question.user

    try:
        validate_password(new_password, user=user)
    except DjangoValidationError as e:
        raise ValidationError(' '.join(e.messages))

    with transaction.atomic():
        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])
        clear_failed_attempts(user.email)

    logger.info(f"Password reset with security question for user {user.pk}")
    return user
