import logging
from threading import Lock

from django.apps import apps
from django.conf import settings
from django.db import DatabaseError

from .client import ApiClient
from .connectivity import ConnectivityMonitor
from .engine import PeriodicPoller, SyncEngine
from .identity import IdentityReconciler
from .queue import OperationQueue

logger = logging.getLogger(__name__)

_runtime_lock = Lock()


class SyncRuntime:
    """
    Wires the queue, connectivity monitor, reconciler, API client and engine
    of one station process together

    Background tasks (debounced drains and the pending-count poll) only run
    when auto-drain is enabled, and the poll only after start()
    """

    def __init__(self, client=None, monitor=None, queue=None, scheduler=None, auto_drain=None, poll_interval=None):
        self.client = client or ApiClient()
        self.monitor = monitor or ConnectivityMonitor()
        self.queue = queue or OperationQueue()
        self.reconciler = IdentityReconciler()
        self.engine = SyncEngine(
            queue=self.queue,
            client=self.client,
            monitor=self.monitor,
            reconciler=self.reconciler,
            scheduler=scheduler,
            auto_drain=auto_drain,
        )

        poll_interval = settings.SYNC_POLL_INTERVAL if poll_interval is None else poll_interval
        self.poller = None
        if self.engine.scheduler is not None and poll_interval > 0:
            self.poller = PeriodicPoller(poll_interval, self.engine.poll)

    def start(self) -> None:
        self.queue.publish_count()
        if self.poller is not None:
            self.poller.start()
        logger.info(f"Sync runtime started ({self.queue.pending_count} pending, online={self.monitor.is_online})")

    def stop(self) -> None:
        if self.poller is not None:
            self.poller.stop()
        if self.engine.scheduler is not None:
            self.engine.scheduler.cancel()

    def status(self) -> dict:
        return self.engine.status()


def get_runtime() -> SyncRuntime:
    """Runtime owned by the sync app config, built and started on first use"""
    config = apps.get_app_config("sync")
    with _runtime_lock:
        if config.runtime is None:
            runtime = SyncRuntime()
            runtime.start()
            config.runtime = runtime
        return config.runtime


def set_runtime(runtime) -> None:
    """Replace (or with None, discard) the process runtime"""
    config = apps.get_app_config("sync")
    with _runtime_lock:
        if config.runtime is not None:
            config.runtime.stop()
        config.runtime = runtime


def start_background_sync():
    """
    Build the runtime when the web process boots, so work left in the queue
    by a previous run drains without waiting for the first request

    Called from config.wsgi only; management commands and tests never start it
    """
    if not settings.SYNC_AUTO_DRAIN:
        return None

    try:
        runtime = get_runtime()
    except DatabaseError as e:
        logger.warning(f"Sync runtime not started at boot, will start on first request: {str(e)}")
        return None

    runtime.engine.poll()
    return runtime
