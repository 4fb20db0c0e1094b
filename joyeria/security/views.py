from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny

from joyeria.core.exceptions import ValidationError
from joyeria.core.serializers import UserCreateSerializer, UserSerializer
from joyeria.core.utils import api_response, get_client_ip, get_user_agent

from . import services
from .login import login
from .registration import register_user
from .serializers import (
    EmailSerializer, LoginSerializer, ResetPasswordSerializer,
    SetSecurityQuestionSerializer, VerifyAnswerSerializer,
)


def _validated(serializer_class, request, message):
    """Validate the body; missing fields become a 400 with ``message``"""
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        raise ValidationError(message, errors=serializer.errors)
    return serializer.validated_data


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def set_security_question(request):
    """Configure or replace the security question of a user"""
    data = _validated(
        SetSecurityQuestionSerializer, request,
        'Email, tipo de pregunta y respuesta son requeridos',
    )
    security_question = services.set_security_question(
        email=data['email'],
        question_type=data['questionType'],
        answer=data['answer'],
        custom_question=data.get('customQuestion'),
    )
    return api_response(
        data={'question': security_question.question_text},
        message='Pregunta secreta configurada correctamente',
    )


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def get_security_question(request):
    """Return the question (never the answer) for an email"""
    data = _validated(EmailSerializer, request, 'Email es requerido')
    return api_response(data=services.get_security_question(data['email']))


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def verify_security_answer(request):
    data = _validated(VerifyAnswerSerializer, request, 'User ID y respuesta son requeridos')
    security_question = services.verify_security_answer(
        data['answer'],
        user_id=data.get('userId'),
        email=data.get('email'),
    )
    return api_response(
        data={'verified': True, 'question': security_question.question_text},
        message='Respuesta correcta',
    )


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def secure_questions(request):
    """Catalog of predefined questions"""
    return api_response(data={'questions': services.list_secure_questions()})


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def reset_password_with_question(request):
    """Reset the password after answering the security question"""
    data = _validated(
        ResetPasswordSerializer, request,
        'User ID, respuesta y nueva contraseña son requeridos',
    )
    services.reset_password_with_security_question(
        data['answer'],
        data['newPassword'],
        user_id=data.get('userId'),
        email=data.get('email'),
    )
    return api_response(message='Contraseña actualizada correctamente')


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    """Email/password login returning a JWT pair"""
    data = _validated(LoginSerializer, request, 'Email y contraseña son requeridos')
    user, tokens = login(
        data['email'],
        data['password'],
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return api_response(
        data={'user': UserSerializer(user).data, **tokens},
        message='Login exitoso',
        status=status.HTTP_200_OK,
    )


MISSING_FIELD_CODES = {'required', 'blank', 'null'}


def _registration_message(errors):
    details = [detail for field_errors in errors.values() for detail in field_errors]
    if any(getattr(detail, 'code', None) in MISSING_FIELD_CODES for detail in details):
        return 'Todos los campos son requeridos'
    return str(details[0]) if details else 'Datos de registro inválidos'


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    """Customer sign-up returning the new user and a JWT pair"""
    serializer = UserCreateSerializer(data=request.data)
    if not serializer.is_valid():
        raise ValidationError(_registration_message(serializer.errors), errors=serializer.errors)
    user, tokens = register_user(serializer)
    return api_response(
        data={'user': UserSerializer(user).data, **tokens},
        message='Usuario registrado correctamente',
        status=status.HTTP_201_CREATED,
    )
