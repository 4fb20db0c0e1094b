"""
Create the login_security throttling table and its indexes
Usage: python manage.py create_login_security_table
"""
from joyeria.core.ddl import LOGIN_SECURITY_STATEMENTS
from joyeria.core.management.base import GuardedDDLCommand


class Command(GuardedDDLCommand):
    help = 'Create the login_security table used to throttle failed logins'
    statements = LOGIN_SECURITY_STATEMENTS
    success_message = 'Table login_security and its indexes verified'
