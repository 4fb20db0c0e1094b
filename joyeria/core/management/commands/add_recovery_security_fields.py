"""
Add the password-recovery throttle columns to usuarios
Usage: python manage.py add_recovery_security_fields
"""
from joyeria.core.ddl import RECOVERY_SECURITY_STATEMENTS
from joyeria.core.management.base import GuardedDDLCommand


class Command(GuardedDDLCommand):
    help = 'Add recovery_attempts, last_recovery_attempt and recovery_blocked_until to usuarios'
    statements = RECOVERY_SECURITY_STATEMENTS
    success_message = 'Recovery columns and index idx_usuarios_recovery_blocked verified'
