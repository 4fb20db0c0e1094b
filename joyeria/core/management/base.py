import logging

from django.core.management.base import BaseCommand

from joyeria.core.db import execute_statements, maintenance_connection

logger = logging.getLogger('joyeria.core.schema')


class GuardedDDLCommand(BaseCommand):
    """
    Apply a fixed list of IF NOT EXISTS statements on a maintenance connection.

    Failures are logged and reported but do not fail the process; the
    connection is closed on every path.
    """
    statements = []
    success_message = 'Schema change applied'

    def handle(self, *args, **options):
        self.stdout.write(f'{self.help}...')
        try:
            with maintenance_connection() as conn:
                execute_statements(conn, self.statements)
        except Exception as e:
            logger.exception(f"{self.__module__.rsplit('.', 1)[-1]} failed: {e}")
            self.stderr.write(self.style.ERROR(f'❌ Error: {e}'))
            code = getattr(e, 'pgcode', None)
            if code:
                self.stderr.write(f'   Error code: {code}')
            return
        self.stdout.write(self.style.SUCCESS(f'✅ {self.success_message}'))
