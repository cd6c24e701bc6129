from django.core.cache import cache
from django.core.management.base import BaseCommand

from hospitals.services import sweep_camp_statuses


class Command(BaseCommand):
    help = "Mark upcoming blood camps whose date passed more than the grace period ago as completed."

    def handle(self, *args, **options):
        # Prevent overlapping executions when run from cron
        lock_key = "raktsetu:update_camp_statuses:lock"
        if not cache.add(lock_key, 1, timeout=55):
            self.stdout.write("Another update_camp_statuses run is active. Exiting.")
            return

        try:
            updated = sweep_camp_statuses()
            self.stdout.write(self.style.SUCCESS(f"Camps completed: {updated}"))
        finally:
            cache.delete(lock_key)
