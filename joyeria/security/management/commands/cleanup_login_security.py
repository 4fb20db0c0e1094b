"""
Delete login_security records whose lock window has passed
Usage: python manage.py cleanup_login_security
"""
import logging

from django.core.management.base import BaseCommand

from joyeria.security.throttle import cleanup_expired_locks

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Remove expired login locks from login_security'

    def handle(self, *args, **options):
        self.stdout.write('🧹 Cleaning up expired login locks...')
        try:
            deleted = cleanup_expired_locks()
        except Exception as e:
            logger.exception(f"Login security cleanup failed: {e}")
            self.stderr.write(self.style.ERROR(f'❌ Error during cleanup: {e}'))
            return
        self.stdout.write(self.style.SUCCESS(f'✅ Cleanup completed: {deleted} expired lock(s) removed'))
