"""
Drop the whole public schema and restore it from a SQL dump
Usage: python manage.py restore_schema [--file PATH] [--confirm]

DESTRUCTIVE: every table and row in schema ``public`` is lost.
"""
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from joyeria.core.db import connection_params, execute_statements, maintenance_connection
from joyeria.core.ddl import RESET_PUBLIC_SCHEMA

logger = logging.getLogger('joyeria.core.schema')

DEFAULT_DUMP = Path(__file__).resolve().parents[2] / 'sql' / 'schema.sql'


class Command(BaseCommand):
    help = 'Drop schema public and recreate it from a SQL dump (irreversible)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            default=str(DEFAULT_DUMP),
            help='SQL dump to load (default: joyeria/core/sql/schema.sql)',
        )
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Skip confirmation prompt',
        )

    def handle(self, *args, **options):
        dump_path = Path(options['file'])
        if not dump_path.is_file():
            raise CommandError(f'SQL dump not found: {dump_path}')
        sql = dump_path.read_text(encoding='utf-8')

        if not options['confirm']:
            database = connection_params()['dbname']
            self.stdout.write(self.style.WARNING(
                f'⚠️  WARNING: This will DROP every table in schema public of "{database}"'
            ))
            self.stdout.write(f'  and reload it from {dump_path}. All data will be lost.')
            self.stdout.write('')
            confirm = input('Type "YES" to confirm: ')
            if confirm != 'YES':
                self.stdout.write(self.style.ERROR('Operation cancelled.'))
                return

        self.stdout.write('Restoring schema...')
        try:
            with maintenance_connection() as conn:
                execute_statements(conn, RESET_PUBLIC_SCHEMA)
                execute_statements(conn, [(f'load {dump_path.name}', sql)])
        except Exception as e:
            logger.exception(f"Schema restore failed: {e}")
            raise CommandError(f'❌ Schema restore failed: {e}')

        self.stdout.write(self.style.SUCCESS('✅ Schema restored successfully'))
