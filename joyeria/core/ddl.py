"""
Guarded DDL for the schema maintenance commands.

Every statement here is safe to run repeatedly: running a command twice
leaves the schema as the first successful run did.
"""

ADD_LAST_ACTIVITY_COLUMN = """
ALTER TABLE usuarios
    ADD COLUMN IF NOT EXISTS last_activity TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
"""

CREATE_LAST_ACTIVITY_INDEX = """
CREATE INDEX IF NOT EXISTS idx_usuarios_last_activity
    ON usuarios(last_activity) WHERE activo = true
"""

ADD_RECOVERY_SECURITY_COLUMNS = """
ALTER TABLE usuarios
    ADD COLUMN IF NOT EXISTS recovery_attempts INTEGER DEFAULT 0,
    ADD COLUMN IF NOT EXISTS last_recovery_attempt TIMESTAMP WITH TIME ZONE,
    ADD COLUMN IF NOT EXISTS recovery_blocked_until TIMESTAMP WITH TIME ZONE
"""

CREATE_RECOVERY_BLOCKED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_usuarios_recovery_blocked ON usuarios(recovery_blocked_until)
"""

CREATE_LOGIN_SECURITY_TABLE = """
CREATE TABLE IF NOT EXISTS login_security (
    id SERIAL PRIMARY KEY,
    email VARCHAR(255) UNIQUE NOT NULL,
    login_attempts INTEGER DEFAULT 0,
    last_login_attempt TIMESTAMP WITH TIME ZONE,
    login_blocked_until TIMESTAMP WITH TIME ZONE,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
)
"""

CREATE_LOGIN_SECURITY_EMAIL_INDEX = """
CREATE INDEX IF NOT EXISTS idx_login_security_email ON login_security(email)
"""

CREATE_LOGIN_SECURITY_BLOCKED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_login_security_blocked ON login_security(login_blocked_until)
"""

CREATE_SECURITY_QUESTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS security_questions (
    id SERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL UNIQUE REFERENCES usuarios(id) ON DELETE CASCADE,
    question_text VARCHAR(500) NOT NULL,
    answer_hash VARCHAR(255) NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
)
"""

CREATE_SECURITY_QUESTIONS_USER_INDEX = """
CREATE INDEX IF NOT EXISTS idx_security_questions_user_id ON security_questions(user_id)
"""

LAST_ACTIVITY_STATEMENTS = [
    ('add column usuarios.last_activity', ADD_LAST_ACTIVITY_COLUMN),
    ('create index idx_usuarios_last_activity', CREATE_LAST_ACTIVITY_INDEX),
]

RECOVERY_SECURITY_STATEMENTS = [
    ('add recovery columns to usuarios', ADD_RECOVERY_SECURITY_COLUMNS),
    ('create index idx_usuarios_recovery_blocked', CREATE_RECOVERY_BLOCKED_INDEX),
]

LOGIN_SECURITY_STATEMENTS = [
    ('create table login_security', CREATE_LOGIN_SECURITY_TABLE),
    ('create index idx_login_security_email', CREATE_LOGIN_SECURITY_EMAIL_INDEX),
    ('create index idx_login_security_blocked', CREATE_LOGIN_SECURITY_BLOCKED_INDEX),
]

SECURITY_QUESTIONS_STATEMENTS = [
    ('create table security_questions', CREATE_SECURITY_QUESTIONS_TABLE),
    ('create index idx_security_questions_user_id', CREATE_SECURITY_QUESTIONS_USER_INDEX),
]

# Destructive: used only by restore_schema behind its confirmation gate
RESET_PUBLIC_SCHEMA = [
    ('drop schema public', 'DROP SCHEMA IF EXISTS public CASCADE'),
    ('create schema public', 'CREATE SCHEMA public'),
]
