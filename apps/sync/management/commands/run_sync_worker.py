"""
Periodic trigger for the offline queue.

Every --interval seconds the pending count is refreshed and a drain is
requested; the drain itself only starts when the station is online and
something is pending. No browser reports connectivity to this process, so
each poll first checks that the central API answers and updates the
worker's connectivity flag from that. Run on headless stations, or from cron:
  python manage.py run_sync_worker --once
"""
import logging
import time

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import close_old_connections

from apps.sync.services import SyncRuntime

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Poll the pending count and drain the sync queue when online"

    def add_arguments(self, parser):
        parser.add_argument("--interval", type=int, default=settings.SYNC_POLL_INTERVAL, help="Seconds between polls")
        parser.add_argument("--once", action="store_true", help="Run a single poll and exit")

    def handle(self, *args, **options):
        # this loop is the trigger, so no timer threads
        runtime = SyncRuntime(auto_drain=False)
        interval = max(1, options["interval"])

        self.stdout.write(f"Sync worker started (interval={interval}s, online={runtime.monitor.is_online})")

        while True:
            close_old_connections()
            pending = runtime.queue.publish_count()
            if pending:
                runtime.monitor.set_online(runtime.client.is_reachable(), source="worker")

            if pending and runtime.monitor.is_online:
                report = runtime.engine.drain()
                if report.started:
                    self.stdout.write(
                        f"Drained {report.attempted} operation(s): {report.outcomes['synced']} synced, "
                        f"{report.outcomes['not_ready']} deferred, {report.outcomes['failed']} failed, "
                        f"{report.outcomes['dropped']} dropped"
                    )
            else:
                logger.debug(f"Poll: {pending} pending, online={runtime.monitor.is_online}")

            if options["once"]:
                break
            time.sleep(interval)

        self.stdout.write(self.style.SUCCESS(f"{runtime.queue.pending_count} operation(s) still pending"))
