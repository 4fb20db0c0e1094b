"""
Add usuarios.last_activity and its partial index
Usage: python manage.py add_last_activity_field
"""
from joyeria.core.ddl import LAST_ACTIVITY_STATEMENTS
from joyeria.core.management.base import GuardedDDLCommand


class Command(GuardedDDLCommand):
    help = 'Add the last_activity column to usuarios and index it for active users'
    statements = LAST_ACTIVITY_STATEMENTS
    success_message = 'Column last_activity and index idx_usuarios_last_activity verified'
