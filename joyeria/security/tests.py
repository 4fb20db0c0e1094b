"""
Tests for the security app
Tests: security questions, password reset, recovery and login throttling, login and
registration endpoints, input screening
"""
from datetime import timedelta
from io import StringIO
from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import check_password
from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from firebase_admin import auth as firebase_auth
from rest_framework import status
from rest_framework.test import APIClient

from joyeria.core.test_utils import TestDataFactory
from joyeria.security import recovery, throttle
from joyeria.security.models import LoginAttempt, LoginSecurity, SecurityQuestion
from joyeria.security.services import SECURE_QUESTIONS
from joyeria.security.validators import check_email_security, check_input_security, check_password_security, sanitize_input

User = get_user_model()

BASE = '/api/v1/security'


class SecureQuestionsTests(TestCase):
    """Test the static question catalog"""

    def setUp(self):
        self.client = APIClient()

    def test_catalog_is_static(self):
        first = self.client.get(f'{BASE}/secure-questions/')
        second = self.client.get(f'{BASE}/secure-questions/', {'anything': 'ignored'})

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertTrue(first.data['success'])
        self.assertEqual(first.data['data'], {'questions': list(SECURE_QUESTIONS)})
        self.assertEqual(second.data['data'], first.data['data'])
        self.assertEqual(len(first.data['data']['questions']), 5)

    def test_catalog_needs_no_authentication(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.get(f'{BASE}/secure-questions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class SetSecurityQuestionTests(TestCase):
    """Test configuring a security question"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='cliente@joyeria.test')

    def post(self, **data):
        return self.client.post(f'{BASE}/set-security-question/', data, format='json')

    def test_set_catalog_question(self):
        response = self.post(email='cliente@joyeria.test', questionType='2', answer='  Maestra Lupita  ')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        question = SecurityQuestion.objects.get(user=self.user)
        self.assertEqual(question.question_text, SECURE_QUESTIONS[2])
        self.assertNotEqual(question.answer_hash, 'Maestra Lupita')
        self.assertTrue(check_password('Maestra Lupita', question.answer_hash))
        self.assertNotIn('answer', response.data.get('data', {}))

    def test_set_custom_question(self):
        response = self.post(
            email='cliente@joyeria.test', questionType='custom',
            customQuestion='  ¿Color de mi primer coche?  ', answer='rojo',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(SecurityQuestion.objects.get(user=self.user).question_text, '¿Color de mi primer coche?')

    def test_setting_again_replaces_question(self):
        self.post(email='cliente@joyeria.test', questionType='0', answer='Firulais')
        self.post(email='cliente@joyeria.test', questionType='4', answer='Hospital Civil')

        self.assertEqual(SecurityQuestion.objects.filter(user=self.user).count(), 1)
        question = SecurityQuestion.objects.get(user=self.user)
        self.assertEqual(question.question_text, SECURE_QUESTIONS[4])
        self.assertTrue(check_password('Hospital Civil', question.answer_hash))
        self.assertFalse(check_password('Firulais', question.answer_hash))

    def test_missing_fields(self):
        response = self.post(email='cliente@joyeria.test', questionType='0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'Email, tipo de pregunta y respuesta son requeridos')

    def test_invalid_question_type(self):
        for question_type in ('5', '-1', 'abc', 'custom'):
            with self.subTest(question_type=question_type):
                response = self.post(email='cliente@joyeria.test', questionType=question_type, answer='Firulais')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data['message'], 'Tipo de pregunta no válido')

    def test_custom_question_length(self):
        short = self.post(email='cliente@joyeria.test', questionType='custom', customQuestion=' ¿Y? ', answer='ok')
        self.assertEqual(short.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('al menos 5', short.data['message'])

        long = self.post(email='cliente@joyeria.test', questionType='custom', customQuestion='x' * 201, answer='ok')
        self.assertEqual(long.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('200', long.data['message'])

        exact = self.post(email='cliente@joyeria.test', questionType='custom', customQuestion='x' * 200, answer='ok')
        self.assertEqual(exact.status_code, status.HTTP_200_OK)

    def test_answer_length(self):
        short = self.post(email='cliente@joyeria.test', questionType='0', answer=' a ')
        self.assertEqual(short.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('al menos 2', short.data['message'])

        long = self.post(email='cliente@joyeria.test', questionType='0', answer='a' * 101)
        self.assertEqual(long.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('100', long.data['message'])

    def test_unknown_user(self):
        response = self.post(email='nadie@joyeria.test', questionType='0', answer='Firulais')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Usuario no encontrado')

    def test_inactive_user(self):
        TestDataFactory.create_user(email='baja@joyeria.test', is_active=False)
        response = self.post(email='baja@joyeria.test', questionType='0', answer='Firulais')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class GetAndVerifySecurityQuestionTests(TestCase):
    """Test reading and answering a security question"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='cliente@joyeria.test')
        TestDataFactory.create_security_question(self.user, answer='Firulais')

    def test_get_question(self):
        response = self.client.post(f'{BASE}/get-security-question/', {'email': 'cliente@joyeria.test'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['userId'], self.user.pk)
        self.assertEqual(data['question'], '¿Cuál era el nombre de tu primera mascota?')
        self.assertEqual(set(data), {'question', 'userId'})

    def test_get_question_missing(self):
        other = TestDataFactory.create_user(email='sinpregunta@joyeria.test')
        response = self.client.post(f'{BASE}/get-security-question/', {'email': other.email}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.post(f'{BASE}/get-security-question/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Email es requerido')

    def test_verify_correct_answer(self):
        response = self.client.post(
            f'{BASE}/verify-security-answer/', {'userId': self.user.pk, 'answer': ' Firulais '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['verified'])

    def test_verify_by_email(self):
        response = self.client.post(
            f'{BASE}/verify-security-answer/', {'email': 'cliente@joyeria.test', 'answer': 'Firulais'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_verify_wrong_answer(self):
        response = self.client.post(
            f'{BASE}/verify-security-answer/', {'userId': self.user.pk, 'answer': 'firulais'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Respuesta incorrecta')
        self.assertEqual(response.data['remainingAttempts'], 2)

    def test_verify_without_question(self):
        other = TestDataFactory.create_user()
        response = self.client.post(
            f'{BASE}/verify-security-answer/', {'userId': other.pk, 'answer': 'Firulais'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_verify_requires_identity(self):
        response = self.client.post(f'{BASE}/verify-security-answer/', {'answer': 'Firulais'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ResetPasswordWithQuestionTests(TestCase):
    """Test password reset through the security question"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='cliente@joyeria.test', password='Anterior#2024')
        TestDataFactory.create_security_question(self.user, answer='Firulais')

    def reset(self, answer, new_password='Nueva#Segura2025'):
        return self.client.post(f'{BASE}/reset-password-with-question/', {
            'userId': self.user.pk,
            'answer': answer,
            'newPassword': new_password,
        }, format='json')

    def test_reset_with_correct_answer(self):
        response = self.reset('Firulais')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Nueva#Segura2025'))

    def test_reset_with_wrong_answer(self):
        response = self.reset('Michi')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Anterior#2024'))

    def test_reset_rejects_weak_password(self):
        response = self.reset('Firulais', new_password='123')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Anterior#2024'))

    def test_reset_clears_login_lock(self):
        TestDataFactory.create_login_security(
            'cliente@joyeria.test', login_attempts=3,
            login_blocked_until=timezone.now() + timedelta(minutes=2),
        )
        self.reset('Firulais')
        self.assertFalse(LoginSecurity.objects.filter(email='cliente@joyeria.test').exists())


class RecoveryThrottleTests(TestCase):
    """Test the per-user block on repeated wrong security answers"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='cliente@joyeria.test', password='Anterior#2024')
        TestDataFactory.create_security_question(self.user, answer='Firulais')

    def verify(self, answer):
        return self.client.post(
            f'{BASE}/verify-security-answer/', {'userId': self.user.pk, 'answer': answer}, format='json')

    def test_third_wrong_answer_blocks_recovery(self):
        self.assertEqual(self.verify('Michi').status_code, status.HTTP_401_UNAUTHORIZED)
        second = self.verify('Michi')
        self.assertEqual(second.data['remainingAttempts'], 1)

        third = self.verify('Michi')

        self.assertEqual(third.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertTrue(third.data['blocked'])
        self.assertEqual(third.data['remainingTime'], 2)
        self.assertEqual(third.data['message'], 'Demasiados intentos. Intente en 2 min.')

        # Even the right answer is refused while blocked
        response = self.verify('Firulais')
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)

    def test_blocked_attempts_are_not_counted(self):
        for _ in range(3):
            self.verify('Michi')
        self.user.refresh_from_db()
        blocked_until = self.user.recovery_blocked_until

        self.verify('Michi')

        self.user.refresh_from_db()
        self.assertEqual(self.user.recovery_attempts, 3)
        self.assertEqual(self.user.recovery_blocked_until, blocked_until)

    def test_expired_block_allows_recovery(self):
        type(self.user).objects.filter(pk=self.user.pk).update(
            recovery_attempts=3, recovery_blocked_until=timezone.now() - timedelta(seconds=1))

        response = self.verify('Firulais')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.recovery_attempts, 0)
        self.assertIsNone(self.user.recovery_blocked_until)

    def test_correct_answer_resets_counter(self):
        self.verify('Michi')
        self.verify('Firulais')

        self.user.refresh_from_db()
        self.assertEqual(self.user.recovery_attempts, 0)
        self.assertEqual(self.verify('Michi').data['remainingAttempts'], 2)

    def test_password_reset_shares_the_block(self):
        for _ in range(3):
            self.verify('Michi')

        response = self.client.post(f'{BASE}/reset-password-with-question/', {
            'userId': self.user.pk,
            'answer': 'Firulais',
            'newPassword': 'Nueva#Segura2025',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Anterior#2024'))

    def test_naive_block_deadline_is_read_as_utc(self):
        user = type(self.user)(
            recovery_attempts=3,
            recovery_blocked_until=timezone.now().replace(tzinfo=None) + timedelta(minutes=1),
        )
        self.assertTrue(recovery.get_recovery_status(user).locked)


class LoginSecurityModelTests(TestCase):
    """Test the login_security table constraints"""

    def test_email_is_unique(self):
        LoginSecurity.objects.create(email='cliente@joyeria.test')
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                LoginSecurity.objects.create(email='cliente@joyeria.test')

    def test_defaults(self):
        record = LoginSecurity.objects.create(email='cliente@joyeria.test')
        self.assertEqual(record.login_attempts, 0)
        self.assertIsNone(record.login_blocked_until)
        self.assertFalse(record.is_locked())


class ThrottleTests(TestCase):
    """Test the lockout counter"""

    email = 'cliente@joyeria.test'

    def test_locks_after_max_attempts(self):
        first = throttle.register_failed_attempt(self.email)
        second = throttle.register_failed_attempt(self.email)
        self.assertFalse(first.locked)
        self.assertEqual(first.remaining_attempts, 2)
        self.assertEqual(second.remaining_attempts, 1)

        third = throttle.register_failed_attempt(self.email)
        self.assertTrue(third.locked)
        self.assertTrue(third.just_locked)
        self.assertIsNotNone(third.locked_until)
        self.assertTrue(throttle.get_lock_status(self.email).locked)

    def test_lock_window_is_not_extended(self):
        for _ in range(3):
            throttle.register_failed_attempt(self.email)
        locked_until = LoginSecurity.objects.get(email=self.email).login_blocked_until

        status_ = throttle.register_failed_attempt(self.email)

        self.assertTrue(status_.locked)
        self.assertFalse(status_.just_locked)
        record = LoginSecurity.objects.get(email=self.email)
        self.assertEqual(record.login_blocked_until, locked_until)
        self.assertEqual(record.login_attempts, 3)

    def test_expired_lock_restarts_counter(self):
        TestDataFactory.create_login_security(
            self.email, login_attempts=3,
            login_blocked_until=timezone.now() - timedelta(seconds=1),
        )
        self.assertFalse(throttle.get_lock_status(self.email).locked)

        status_ = throttle.register_failed_attempt(self.email)

        self.assertFalse(status_.locked)
        self.assertEqual(status_.attempts, 1)
        self.assertIsNone(LoginSecurity.objects.get(email=self.email).login_blocked_until)

    def test_naive_block_deadline_is_read_as_utc(self):
        """Rows from a plain TIMESTAMP column come back without tzinfo"""
        naive_now = timezone.now().replace(tzinfo=None)
        record = LoginSecurity(email=self.email, login_attempts=3,
                               login_blocked_until=naive_now + timedelta(minutes=1))

        status_ = throttle._status_for(record, timezone.now())

        self.assertTrue(status_.locked)
        self.assertEqual(status_.remaining_minutes, 1)
        self.assertTrue(record.is_locked())

        record.login_blocked_until = naive_now - timedelta(minutes=1)
        self.assertFalse(throttle._status_for(record, timezone.now()).locked)
        self.assertFalse(record.is_locked())

    def test_email_is_normalized(self):
        throttle.register_failed_attempt('  Cliente@Joyeria.TEST ')
        throttle.register_failed_attempt(self.email)
        self.assertEqual(LoginSecurity.objects.get(email=self.email).login_attempts, 2)

    def test_clear(self):
        throttle.register_failed_attempt(self.email)
        throttle.clear_failed_attempts(self.email)
        self.assertFalse(LoginSecurity.objects.filter(email=self.email).exists())

    def test_cleanup_removes_only_expired_locks(self):
        now = timezone.now()
        TestDataFactory.create_login_security('expirado@joyeria.test', 3, now - timedelta(minutes=1))
        TestDataFactory.create_login_security('vigente@joyeria.test', 3, now + timedelta(minutes=1))
        TestDataFactory.create_login_security('intentos@joyeria.test', 1, None)

        removed = throttle.cleanup_expired_locks()

        self.assertEqual(removed, 1)
        self.assertEqual(
            set(LoginSecurity.objects.values_list('email', flat=True)),
            {'vigente@joyeria.test', 'intentos@joyeria.test'},
        )

    def test_cleanup_command(self):
        TestDataFactory.create_login_security('expirado@joyeria.test', 3, timezone.now() - timedelta(minutes=1))
        out = StringIO()
        call_command('cleanup_login_security', stdout=out)
        self.assertIn('1 expired lock', out.getvalue())
        self.assertFalse(LoginSecurity.objects.exists())


class LoginEndpointTests(TestCase):
    """Test POST /api/v1/auth/login/"""

    url = '/api/v1/auth/login/'

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='cliente@joyeria.test', password='Correcta#2024')

    def login(self, password, email='cliente@joyeria.test'):
        return self.client.post(self.url, {'email': email, 'password': password}, format='json')

    def test_successful_login(self):
        response = self.login('Correcta#2024')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertIn('access', data)
        self.assertIn('refresh', data)
        self.assertEqual(data['user']['email'], 'cliente@joyeria.test')
        attempt = LoginAttempt.objects.get()
        self.assertTrue(attempt.success)

    def test_access_token_works(self):
        access = self.login('Correcta#2024').data['data']['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password_reports_remaining_attempts(self):
        response = self.login('Incorrecta')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['remainingAttempts'], 2)
        self.assertEqual(LoginSecurity.objects.get(email='cliente@joyeria.test').login_attempts, 1)
        self.assertEqual(LoginAttempt.objects.get().failure_reason, 'invalid_credentials')

    def test_unknown_email_is_throttled_too(self):
        response = self.login('Incorrecta', email='nadie@joyeria.test')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertTrue(LoginSecurity.objects.filter(email='nadie@joyeria.test').exists())

    def test_lockout_after_three_failures(self):
        self.login('Incorrecta')
        self.login('Incorrecta')
        third = self.login('Incorrecta')

        self.assertEqual(third.status_code, status.HTTP_423_LOCKED)
        self.assertTrue(third.data['locked'])

        # Correct password is refused while locked
        response = self.login('Correcta#2024')
        self.assertEqual(response.status_code, status.HTTP_423_LOCKED)
        self.assertIn('lockedUntil', response.data)
        self.assertEqual(LoginAttempt.objects.filter(failure_reason='account_locked').count(), 1)

    def test_unlocks_after_expiry(self):
        for _ in range(3):
            self.login('Incorrecta')
        LoginSecurity.objects.filter(email='cliente@joyeria.test').update(
            login_blocked_until=timezone.now() - timedelta(seconds=1))

        response = self.login('Correcta#2024')

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_success_clears_counter(self):
        self.login('Incorrecta')
        self.login('Incorrecta')

        self.login('Correcta#2024')

        self.assertFalse(LoginSecurity.objects.filter(email='cliente@joyeria.test').exists())
        self.assertEqual(self.login('Incorrecta').data['remainingAttempts'], 2)

    def test_success_touches_activity(self):
        earlier = timezone.now() - timedelta(hours=1)
        type(self.user).objects.filter(pk=self.user.pk).update(last_activity=earlier)

        self.login('Correcta#2024')

        self.user.refresh_from_db()
        self.assertGreater(self.user.last_activity, earlier)
        self.assertIsNotNone(self.user.last_login)

    def test_hostile_input_rejected(self):
        response = self.login('x', email="' OR 1=1 --")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('SQL injection', response.data['message'])
        self.assertFalse(LoginSecurity.objects.exists())

    def test_missing_fields(self):
        response = self.client.post(self.url, {'email': 'cliente@joyeria.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @patch('joyeria.security.throttle.LoginAttempt.objects.create', side_effect=Exception('disk full'))
    def test_audit_failure_does_not_block_login(self, create):
        response = self.login('Correcta#2024')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    @patch('joyeria.security.login.get_lock_status')
    def test_failure_after_concurrent_lock_answers_locked(self, get_lock_status):
        """The pre-check saw no lock but another request locked the email meanwhile"""
        get_lock_status.return_value = throttle.LockStatus(locked=False, attempts=2, remaining_attempts=1)
        TestDataFactory.create_login_security(
            'cliente@joyeria.test', login_attempts=3,
            login_blocked_until=timezone.now() + timedelta(minutes=2),
        )

        response = self.login('Incorrecta')

        self.assertEqual(response.status_code, status.HTTP_423_LOCKED)
        self.assertTrue(response.data['locked'])
        self.assertNotIn('remainingAttempts', response.data)
        self.assertEqual(LoginSecurity.objects.get(email='cliente@joyeria.test').login_attempts, 3)


class TrailingSlashTests(TestCase):
    """Test that the auth and security routes answer without a trailing slash"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='cliente@joyeria.test', password='Correcta#2024')
        TestDataFactory.create_security_question(self.user, answer='Firulais')

    def test_login_without_slash(self):
        response = self.client.post(
            '/api/v1/auth/login', {'email': 'cliente@joyeria.test', 'password': 'Correcta#2024'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_security_routes_without_slash(self):
        response = self.client.post(
            f'{BASE}/get-security-question', {'email': 'cliente@joyeria.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(
            f'{BASE}/verify-security-answer', {'userId': self.user.pk, 'answer': 'Firulais'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(f'{BASE}/secure-questions')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unknown_user_without_slash_is_not_redirected(self):
        response = self.client.post(
            f'{BASE}/set-security-question',
            {'email': 'nadie@joyeria.test', 'questionType': '0', 'answer': 'Firulais'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class RegisterEndpointTests(TestCase):
    """Test POST /api/v1/auth/register/"""

    url = '/api/v1/auth/register/'

    def setUp(self):
        self.client = APIClient()

    def register(self, **overrides):
        body = {'email': 'Nueva@Joyeria.test', 'password': 'Segura#2025', 'nombre': 'Laura'}
        body.update(overrides)
        return self.client.post(self.url, body, format='json')

    def test_register_returns_user_and_tokens(self):
        response = self.register()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertIn('access', data)
        self.assertIn('refresh', data)
        self.assertEqual(data['user']['email'], 'nueva@joyeria.test')
        self.assertEqual(data['user']['first_name'], 'Laura')

        user = User.objects.get(email='nueva@joyeria.test')
        self.assertEqual(user.username, 'nueva@joyeria.test')
        self.assertTrue(user.is_active)
        self.assertFalse(user.is_staff)
        self.assertTrue(user.check_password('Segura#2025'))
        self.assertIsNone(user.firebase_uid)

    def test_new_user_can_log_in(self):
        self.register()
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'nueva@joyeria.test', 'password': 'Segura#2025'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_missing_fields(self):
        response = self.client.post(self.url, {'email': 'nueva@joyeria.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Todos los campos son requeridos')

        response = self.register(nombre='')
        self.assertEqual(response.data['message'], 'Todos los campos son requeridos')

    def test_duplicate_email(self):
        TestDataFactory.create_user(email='nueva@joyeria.test')

        response = self.register(email='NUEVA@joyeria.test')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'El email ya está registrado')
        self.assertEqual(User.objects.filter(email__iexact='nueva@joyeria.test').count(), 1)

    def test_invalid_email(self):
        response = self.register(email='no-es-un-email')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Formato de email inválido')

    def test_weak_password(self):
        response = self.register(password='123')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data['errors'])
        self.assertFalse(User.objects.filter(email='nueva@joyeria.test').exists())

    @patch('joyeria.security.registration.firebase_clients')
    def test_firebase_account_is_linked(self, firebase_clients):
        clients = MagicMock()
        clients.auth.create_user.return_value = 'firebase-uid-123'
        firebase_clients.return_value = clients

        response = self.register()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        clients.auth.create_user.assert_called_once_with(
            'nueva@joyeria.test', 'Segura#2025', display_name='Laura')
        self.assertEqual(User.objects.get(email='nueva@joyeria.test').firebase_uid, 'firebase-uid-123')

    @patch('joyeria.security.registration.firebase_clients')
    def test_firebase_duplicate_email(self, firebase_clients):
        clients = MagicMock()
        clients.auth.create_user.side_effect = firebase_auth.EmailAlreadyExistsError('exists', None, None)
        firebase_clients.return_value = clients

        response = self.register()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'El email ya está registrado')
        self.assertFalse(User.objects.filter(email='nueva@joyeria.test').exists())


class InputScreeningTests(SimpleTestCase):
    """Test the SQL injection / XSS screening"""

    def test_clean_input(self):
        self.assertIsNone(check_email_security('cliente@joyeria.test'))
        self.assertIsNone(check_password_security('Correcta#2024'))

    def test_sql_injection(self):
        self.assertIsNotNone(check_input_security("admin' OR '1'='1", 'Email'))
        self.assertIsNotNone(check_input_security('x; DROP TABLE usuarios', 'Email'))

    def test_xss(self):
        self.assertIn('XSS', check_input_security('<script>alert(1)</script>', 'Nombre'))
        self.assertIn('XSS', check_input_security('javascript:alert(1)', 'Nombre'))

    def test_password_blatant_cases(self):
        self.assertIsNotNone(check_password_security('abc; DROP TABLE usuarios'))
        self.assertIsNotNone(check_password_security('<script>'))
        self.assertEqual(check_password_security(''), 'La contraseña es requerida')

    def test_sanitize(self):
        self.assertEqual(sanitize_input('  <b>Diana</b>\x00 '), 'Diana')
        self.assertEqual(sanitize_input(None), '')
