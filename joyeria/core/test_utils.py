"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from joyeria.catalog.models import Category, Product
from joyeria.security.models import SecurityQuestion, LoginSecurity
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False, **extra):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser,
            **extra
        )

    @staticmethod
    def create_security_question(user, question_text=None, answer='Firulais'):
        """Create a security question with a hashed answer"""
        return SecurityQuestion.objects.create(
            user=user,
            question_text=question_text or '¿Cuál era el nombre de tu primera mascota?',
            answer_hash=make_password(answer),
        )

    @staticmethod
    def create_login_security(email, login_attempts=0, login_blocked_until=None):
        """Create a throttling record for an email"""
        return LoginSecurity.objects.create(
            email=email,
            login_attempts=login_attempts,
            login_blocked_until=login_blocked_until,
        )

    @staticmethod
    def create_category(nombre=None, activo=True, **extra):
        """Create a test product category"""
        if not nombre:
            nombre = f'Categoría {TestDataFactory.random_string(6)}'
        return Category.objects.create(nombre=nombre, activo=activo, **extra)

    @staticmethod
    def create_product(categoria=None, nombre=None, precio=Decimal('1500.00'), stock=5, activo=True, **extra):
        """Create a test product"""
        if not nombre:
            nombre = f'Anillo {TestDataFactory.random_string(6)}'
        return Product.objects.create(
            nombre=nombre,
            categoria=categoria,
            precio=precio,
            stock=stock,
            activo=activo,
            **extra
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
