"""
Create the security_questions table and its index
Usage: python manage.py create_security_questions_table
"""
from joyeria.core.ddl import SECURITY_QUESTIONS_STATEMENTS
from joyeria.core.management.base import GuardedDDLCommand


class Command(GuardedDDLCommand):
    help = 'Create the security_questions table for password recovery'
    statements = SECURITY_QUESTIONS_STATEMENTS
    success_message = 'Table security_questions verified'
