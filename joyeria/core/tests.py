"""
Tests for the core app
Tests: schema maintenance commands, Firebase bootstrap, error envelope, session inactivity
"""
import re
from datetime import timedelta
from io import StringIO
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock, patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError as DjangoDatabaseError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.test import APIRequestFactory

from joyeria.core.authentication import FirebaseAuthentication
from joyeria.core.db import connection_params
from joyeria.core.ddl import (
    LAST_ACTIVITY_STATEMENTS, LOGIN_SECURITY_STATEMENTS, RECOVERY_SECURITY_STATEMENTS,
    SECURITY_QUESTIONS_STATEMENTS,
)
from joyeria.core.exceptions import (
    AccountLockedError, ConfigurationError, NotFoundError, api_exception_handler,
)
from joyeria.core.firebase import FIREBASE_ENV_KEYS, init_firebase, load_firebase_config
from joyeria.core.models import User
from joyeria.core.test_utils import TestDataFactory, AuthenticatedAPIClient

DB_ENV = {
    'DB_HOST': 'db.example.com',
    'DB_USER': 'joyeria',
    'DB_PASSWORD': 'secret',
    'DB_NAME': 'joyeria',
    'DB_PORT': '5433',
}

FIREBASE_ENV = {
    'REACT_APP_FIREBASE_API_KEY': 'api-key',
    'REACT_APP_FIREBASE_AUTH_DOMAIN': 'joyeria.firebaseapp.com',
    'REACT_APP_FIREBASE_PROJECT_ID': 'joyeria',
    'REACT_APP_FIREBASE_STORAGE_BUCKET': 'joyeria.appspot.com',
    'REACT_APP_FIREBASE_MESSAGING_SENDER_ID': '1234567890',
    'REACT_APP_FIREBASE_APP_ID': '1:1234567890:web:abcdef',
}

DESTRUCTIVE_KEYWORD = re.compile(r'(?<!ON )\b(DROP|DELETE|UPDATE|TRUNCATE)\b', re.IGNORECASE)
NAIVE_TIMESTAMP = re.compile(r'\bTIMESTAMP\b(?! WITH TIME ZONE)')

ALL_GUARDED_STATEMENTS = (
    LAST_ACTIVITY_STATEMENTS, LOGIN_SECURITY_STATEMENTS,
    SECURITY_QUESTIONS_STATEMENTS, RECOVERY_SECURITY_STATEMENTS,
)


def mock_connection():
    """A psycopg2 connection double whose cursor records executed SQL"""
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    return conn, cursor


def executed_sql(cursor):
    return [c.args[0] for c in cursor.execute.call_args_list]


class ConnectionParamsTests(SimpleTestCase):
    """Test the maintenance connection parameters"""

    def test_params_from_environment(self):
        params = connection_params(DB_ENV)
        self.assertEqual(params['host'], 'db.example.com')
        self.assertEqual(params['user'], 'joyeria')
        self.assertEqual(params['dbname'], 'joyeria')
        self.assertEqual(params['port'], 5433)
        self.assertEqual(params['sslmode'], 'require')
        self.assertEqual(params['connect_timeout'], 30)

    def test_default_port(self):
        env = dict(DB_ENV)
        del env['DB_PORT']
        self.assertEqual(connection_params(env)['port'], 5432)


@patch.dict('os.environ', DB_ENV)
class GuardedDDLCommandTests(SimpleTestCase):
    """Test the idempotent schema maintenance commands"""

    def run_command(self, name):
        out, err = StringIO(), StringIO()
        call_command(name, stdout=out, stderr=err)
        return out.getvalue(), err.getvalue()

    def test_statements_are_guarded(self):
        """Every idempotent statement uses an IF NOT EXISTS guard"""
        for statements in ALL_GUARDED_STATEMENTS:
            for label, sql in statements:
                self.assertIn('IF NOT EXISTS', sql, label)
                self.assertIsNone(DESTRUCTIVE_KEYWORD.search(sql), label)

    def test_keyword_check_ignores_identifiers(self):
        """Column names and ON DELETE clauses are not destructive statements"""
        self.assertIsNone(DESTRUCTIVE_KEYWORD.search('updated_at TIMESTAMP, dropped_count INTEGER'))
        self.assertIsNone(DESTRUCTIVE_KEYWORD.search('REFERENCES usuarios(id) ON DELETE CASCADE'))
        self.assertIsNotNone(DESTRUCTIVE_KEYWORD.search('drop table login_security'))

    def test_timestamp_columns_carry_time_zone(self):
        """Lock and activity instants are stored as timestamptz, matching USE_TZ"""
        for statements in ALL_GUARDED_STATEMENTS:
            for label, sql in statements:
                self.assertIsNone(NAIVE_TIMESTAMP.search(sql), label)
        self.assertIn('login_blocked_until TIMESTAMP WITH TIME ZONE', LOGIN_SECURITY_STATEMENTS[0][1])

    @patch('joyeria.core.db.psycopg2.connect')
    def test_add_last_activity_field(self, connect):
        conn, cursor = mock_connection()
        connect.return_value = conn

        out, err = self.run_command('add_last_activity_field')

        self.assertIn('✅', out)
        self.assertEqual(err, '')
        sql = executed_sql(cursor)
        self.assertEqual(len(sql), 2)
        self.assertIn('ADD COLUMN IF NOT EXISTS last_activity', sql[0])
        self.assertIn('idx_usuarios_last_activity', sql[1])
        self.assertIn('WHERE activo = true', sql[1])
        self.assertTrue(conn.autocommit)
        conn.close.assert_called_once()

        kwargs = connect.call_args.kwargs
        self.assertEqual(kwargs['sslmode'], 'require')
        self.assertEqual(kwargs['connect_timeout'], 30)
        self.assertEqual(kwargs['host'], 'db.example.com')

    @patch('joyeria.core.db.psycopg2.connect')
    def test_running_twice_issues_same_statements(self, connect):
        """An existing column leaves nothing to do; the second run still succeeds"""
        first_conn, first_cursor = mock_connection()
        second_conn, second_cursor = mock_connection()
        connect.side_effect = [first_conn, second_conn]

        first_out, _ = self.run_command('add_last_activity_field')
        second_out, _ = self.run_command('add_last_activity_field')

        self.assertIn('✅', first_out)
        self.assertIn('✅', second_out)
        self.assertEqual(executed_sql(first_cursor), executed_sql(second_cursor))
        first_conn.close.assert_called_once()
        second_conn.close.assert_called_once()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_create_login_security_table(self, connect):
        conn, cursor = mock_connection()
        connect.return_value = conn

        out, _ = self.run_command('create_login_security_table')

        sql = executed_sql(cursor)
        self.assertIn('CREATE TABLE IF NOT EXISTS login_security', sql[0])
        self.assertIn('email VARCHAR(255) UNIQUE NOT NULL', sql[0])
        self.assertIn('idx_login_security_email', sql[1])
        self.assertIn('idx_login_security_blocked', sql[2])
        self.assertIn('✅', out)
        conn.close.assert_called_once()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_create_security_questions_table(self, connect):
        conn, cursor = mock_connection()
        connect.return_value = conn

        self.run_command('create_security_questions_table')

        sql = executed_sql(cursor)
        self.assertIn('CREATE TABLE IF NOT EXISTS security_questions', sql[0])
        self.assertIn('idx_security_questions_user_id', sql[1])
        conn.close.assert_called_once()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_add_recovery_security_fields(self, connect):
        conn, cursor = mock_connection()
        connect.return_value = conn

        out, err = self.run_command('add_recovery_security_fields')

        sql = executed_sql(cursor)
        self.assertIn('ADD COLUMN IF NOT EXISTS recovery_attempts INTEGER DEFAULT 0', sql[0])
        self.assertIn('recovery_blocked_until TIMESTAMP WITH TIME ZONE', sql[0])
        self.assertIn('idx_usuarios_recovery_blocked', sql[1])
        self.assertIn('✅', out)
        self.assertEqual(err, '')
        conn.close.assert_called_once()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_statement_failure_is_reported_and_connection_closed(self, connect):
        conn, cursor = mock_connection()
        error = Exception('relation "usuarios" does not exist')
        error.pgcode = '42P01'
        cursor.execute.side_effect = error
        connect.return_value = conn

        out, err = self.run_command('add_last_activity_field')

        self.assertIn('❌', err)
        self.assertIn('42P01', err)
        self.assertNotIn('✅', out)
        conn.close.assert_called_once()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_connection_failure_is_not_fatal(self, connect):
        connect.side_effect = Exception('timeout expired')

        out, err = self.run_command('create_login_security_table')

        self.assertIn('timeout expired', err)
        self.assertNotIn('✅', out)


@patch.dict('os.environ', DB_ENV)
class RestoreSchemaCommandTests(SimpleTestCase):
    """Test the destructive schema restore"""

    def setUp(self):
        self.tmpdir = TemporaryDirectory()
        self.dump = Path(self.tmpdir.name) / 'dump.sql'
        self.dump.write_text('CREATE TABLE usuarios (id BIGSERIAL PRIMARY KEY);', encoding='utf-8')

    def tearDown(self):
        self.tmpdir.cleanup()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_restore_with_confirm(self, connect):
        conn, cursor = mock_connection()
        connect.return_value = conn
        out = StringIO()

        call_command('restore_schema', file=str(self.dump), confirm=True, stdout=out)

        sql = executed_sql(cursor)
        self.assertEqual(sql[0], 'DROP SCHEMA IF EXISTS public CASCADE')
        self.assertEqual(sql[1], 'CREATE SCHEMA public')
        self.assertEqual(sql[2], 'CREATE TABLE usuarios (id BIGSERIAL PRIMARY KEY);')
        self.assertIn('✅', out.getvalue())
        conn.close.assert_called_once()

    @patch('builtins.input', return_value='no')
    @patch('joyeria.core.db.psycopg2.connect')
    def test_restore_cancelled_without_confirmation(self, connect, mock_input):
        out = StringIO()

        call_command('restore_schema', file=str(self.dump), stdout=out)

        mock_input.assert_called_once()
        connect.assert_not_called()
        self.assertIn('cancelled', out.getvalue())

    @patch('builtins.input', return_value='YES')
    @patch('joyeria.core.db.psycopg2.connect')
    def test_restore_after_typed_confirmation(self, connect, mock_input):
        conn, _ = mock_connection()
        connect.return_value = conn

        call_command('restore_schema', file=str(self.dump), stdout=StringIO())

        connect.assert_called_once()
        conn.close.assert_called_once()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_missing_dump_fails_before_connecting(self, connect):
        with self.assertRaises(CommandError):
            call_command('restore_schema', file=str(Path(self.tmpdir.name) / 'missing.sql'),
                         confirm=True, stdout=StringIO())
        connect.assert_not_called()

    @patch('joyeria.core.db.psycopg2.connect')
    def test_restore_failure_is_fatal_and_closes_connection(self, connect):
        conn, cursor = mock_connection()
        cursor.execute.side_effect = [None, None, Exception('syntax error at or near "TABLE"')]
        connect.return_value = conn

        with self.assertRaises(CommandError) as ctx:
            call_command('restore_schema', file=str(self.dump), confirm=True, stdout=StringIO())

        self.assertIn('syntax error', str(ctx.exception))
        conn.close.assert_called_once()

    def test_default_dump_is_shipped(self):
        from joyeria.core.management.commands.restore_schema import DEFAULT_DUMP
        self.assertTrue(DEFAULT_DUMP.is_file())
        self.assertIn('CREATE TABLE login_security', DEFAULT_DUMP.read_text(encoding='utf-8'))


class FirebaseConfigTests(SimpleTestCase):
    """Test Firebase configuration loading and bootstrap"""

    def test_complete_config(self):
        config = load_firebase_config(FIREBASE_ENV)
        self.assertEqual(config.project_id, 'joyeria')
        self.assertEqual(config.app_id, '1:1234567890:web:abcdef')

    @patch('joyeria.core.firebase.firebase_admin.initialize_app')
    def test_each_missing_key_fails_before_initialization(self, initialize_app):
        for env_name in FIREBASE_ENV_KEYS.values():
            with self.subTest(missing=env_name):
                env = dict(FIREBASE_ENV)
                del env[env_name]
                with self.assertRaises(ConfigurationError) as ctx:
                    init_firebase(load_firebase_config(env))
                self.assertEqual(ctx.exception.missing, [env_name])
        initialize_app.assert_not_called()

    @patch('joyeria.core.firebase.firebase_admin.initialize_app')
    def test_each_blank_key_fails_before_initialization(self, initialize_app):
        for env_name in FIREBASE_ENV_KEYS.values():
            with self.subTest(blank=env_name):
                env = dict(FIREBASE_ENV, **{env_name: '   '})
                with self.assertRaises(ConfigurationError) as ctx:
                    load_firebase_config(env)
                self.assertIn(env_name, str(ctx.exception))
        initialize_app.assert_not_called()

    def test_all_missing_keys_are_reported(self):
        with self.assertRaises(ConfigurationError) as ctx:
            load_firebase_config({})
        self.assertEqual(sorted(ctx.exception.missing), sorted(FIREBASE_ENV_KEYS.values()))

    @patch('joyeria.core.firebase.firestore.client')
    @patch('joyeria.core.firebase.firebase_admin.initialize_app')
    def test_init_creates_app_once_and_firestore_lazily(self, initialize_app, firestore_client):
        clients = init_firebase(load_firebase_config(FIREBASE_ENV), name='test-app')

        initialize_app.assert_called_once()
        self.assertEqual(initialize_app.call_args.kwargs['name'], 'test-app')
        self.assertEqual(initialize_app.call_args.kwargs['options']['projectId'], 'joyeria')
        self.assertIs(clients.app, initialize_app.return_value)
        firestore_client.assert_not_called()

        first = clients.firestore
        second = clients.firestore
        self.assertIs(first, second)
        firestore_client.assert_called_once_with(app=initialize_app.return_value)


class FirebaseAuthenticationTests(TestCase):
    """Test authentication with Firebase ID tokens"""

    def setUp(self):
        self.user = TestDataFactory.create_user(firebase_uid='uid-123')
        self.clients = MagicMock()
        self.factory = APIRequestFactory()

    def test_valid_token_maps_to_user(self):
        self.clients.auth.verify_id_token.return_value = {'uid': 'uid-123'}
        request = self.factory.get('/', HTTP_AUTHORIZATION='Firebase good-token')

        user, decoded = FirebaseAuthentication(clients=self.clients).authenticate(request)

        self.assertEqual(user, self.user)
        self.clients.auth.verify_id_token.assert_called_once_with('good-token')

    def test_other_schemes_are_ignored(self):
        request = self.factory.get('/', HTTP_AUTHORIZATION='Bearer something')
        self.assertIsNone(FirebaseAuthentication(clients=self.clients).authenticate(request))

    def test_invalid_token_rejected(self):
        from rest_framework.exceptions import AuthenticationFailed
        self.clients.auth.verify_id_token.side_effect = ValueError('expired')
        request = self.factory.get('/', HTTP_AUTHORIZATION='Firebase bad-token')
        with self.assertRaises(AuthenticationFailed):
            FirebaseAuthentication(clients=self.clients).authenticate(request)

    def test_unknown_uid_rejected(self):
        from rest_framework.exceptions import AuthenticationFailed
        self.clients.auth.verify_id_token.return_value = {'uid': 'someone-else'}
        request = self.factory.get('/', HTTP_AUTHORIZATION='Firebase good-token')
        with self.assertRaises(AuthenticationFailed):
            FirebaseAuthentication(clients=self.clients).authenticate(request)


class ExceptionHandlerTests(SimpleTestCase):
    """Test the error envelope"""

    def test_not_found(self):
        response = api_exception_handler(NotFoundError('Usuario no encontrado'), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'message': 'Usuario no encontrado'})

    def test_extra_fields_are_merged(self):
        response = api_exception_handler(AccountLockedError('Bloqueada', remainingMinutes=2), {})
        self.assertEqual(response.status_code, status.HTTP_423_LOCKED)
        self.assertTrue(response.data['locked'])
        self.assertEqual(response.data['remainingMinutes'], 2)

    def test_serializer_errors_are_flattened(self):
        response = api_exception_handler(DRFValidationError({'email': ['Este campo es requerido.']}), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'email: Este campo es requerido.')
        self.assertIn('email', response.data['errors'])

    def test_database_error_becomes_logged_500(self):
        with self.assertLogs('joyeria.core.exceptions', level='ERROR'):
            response = api_exception_handler(DjangoDatabaseError('connection refused'), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['message'], 'Error interno del servidor')

    def test_unknown_exception_left_to_django(self):
        self.assertIsNone(api_exception_handler(KeyError('x'), {}))


class SessionActivityTests(TestCase):
    """Test inactivity expiry on authenticated endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_me_touches_activity(self):
        earlier = timezone.now() - timedelta(minutes=5)
        User.objects.filter(pk=self.user.pk).update(last_activity=earlier)

        response = self.client.get('/api/v1/auth/me/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['email'], self.user.email)
        self.user.refresh_from_db()
        self.assertGreater(self.user.last_activity, earlier)

    def test_idle_session_expires(self):
        User.objects.filter(pk=self.user.pk).update(last_activity=timezone.now() - timedelta(minutes=20))

        response = self.client.get('/api/v1/auth/me/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertTrue(response.data['expired'])

    def test_naive_last_activity_is_read_as_utc(self):
        """A plain TIMESTAMP column hands back naive values"""
        naive_now = timezone.now().replace(tzinfo=None)
        self.assertTrue(User(last_activity=naive_now - timedelta(minutes=20)).is_inactive_for(15))
        self.assertFalse(User(last_activity=naive_now - timedelta(minutes=5)).is_inactive_for(15))

    def test_me_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_is_inactive_for(self):
        now = timezone.now()
        self.user.last_activity = now - timedelta(minutes=16)
        self.assertTrue(self.user.is_inactive_for(15, now=now))
        self.user.last_activity = now - timedelta(minutes=14)
        self.assertFalse(self.user.is_inactive_for(15, now=now))
