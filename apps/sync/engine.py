import logging
from dataclasses import dataclass, field
from threading import Event, Lock, Thread, Timer
from typing import Optional

from django.conf import settings
from django.db import connections
from django.utils import timezone

from .client import RemoteError
from .handlers import HANDLER_CLASSES, ReplayOutcome
from .identity import IdentityReconciler
from .models import EntityKind, OperationKind
from .signals import connectivity_changed, operation_enqueued, operation_replayed, syncing_changed

logger = logging.getLogger(__name__)


@dataclass
class DrainReport:
    started: bool = False
    reason: str = ""
    outcomes: dict = field(default_factory=lambda: {outcome.value: 0 for outcome in ReplayOutcome})

    def record(self, outcome: ReplayOutcome) -> None:
        self.outcomes[outcome.value] += 1

    @property
    def attempted(self) -> int:
        return sum(self.outcomes.values())

    def as_dict(self) -> dict:
        return {"started": self.started, "reason": self.reason, "attempted": self.attempted, **self.outcomes}


class DebouncedScheduler:
    """
    Runs the callback once, `delay` seconds after the last schedule() call
    The callback runs on a timer thread, whose DB connections are closed after
    """

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self._timer = None
        self._lock = Lock()

    def schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = Timer(self.delay, self._run)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _run(self) -> None:
        try:
            self.callback()
        except Exception as e:
            logger.exception(f"Scheduled drain crashed: {str(e)}")
        finally:
            connections.close_all()


class PeriodicPoller:
    """
    Calls the callback every `interval` seconds on a daemon thread until stopped
    """

    def __init__(self, interval: float, callback):
        self.interval = interval
        self.callback = callback
        self._stopped = Event()
        self._thread = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopped.clear()
        self._thread = Thread(target=self._loop, name="sync-poller", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()

    def _loop(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                logger.exception(f"Pending-count poll crashed: {str(e)}")
            finally:
                connections.close_all()


class SyncEngine:
    """
    Drains the operation queue against the central API

    Two states: Idle and Draining. A drain only starts when the station is
    online, something is pending and no other drain is running; a call made
    while draining returns immediately. Each cycle replays the queue snapshot
    taken at its start, one operation at a time, oldest first, and never
    stops early on a failure. Operations enqueued mid-cycle wait for the next
    trigger (enqueue, connectivity regain or the worker poll).
    """

    def __init__(self, queue, client, monitor, reconciler: IdentityReconciler = None, scheduler=None, auto_drain: bool = None):  # type: ignore
        self.queue = queue
        self.client = client
        self.monitor = monitor
        self.reconciler = reconciler or IdentityReconciler()
        self.handlers = {kind: handler_class(client, queue, self.reconciler) for kind, handler_class in HANDLER_CLASSES.items()}

        missing = set(EntityKind.values) - {str(kind) for kind in self.handlers}
        if missing:
            raise ValueError(f"No sync handler for entity kinds: {', '.join(sorted(missing))}")

        auto_drain = settings.SYNC_AUTO_DRAIN if auto_drain is None else auto_drain
        if scheduler is None and auto_drain:
            scheduler = DebouncedScheduler(settings.SYNC_DEBOUNCE_SECONDS, self.drain)
        self.scheduler = scheduler

        self.last_drain_at = None
        self.last_report: Optional[DrainReport] = None
        self._draining = False
        self._guard = Lock()

        operation_enqueued.connect(self._on_enqueued, sender=queue)
        connectivity_changed.connect(self._on_connectivity_changed, sender=monitor)

    @property
    def is_syncing(self) -> bool:
        return self._draining

    def status(self) -> dict:
        return {
            "is_online": self.monitor.is_online,
            "is_syncing": self.is_syncing,
            "pending_count": self.queue.pending_count,
            "last_drain_at": self.last_drain_at,
            "last_report": self.last_report.as_dict() if self.last_report else None,
        }

    # triggers

    def request_drain(self) -> bool:
        """Ask for a drain soon; repeated requests collapse into one"""
        if self.scheduler is None:
            return False
        self.scheduler.schedule()
        return True

    def poll(self) -> int:
        """Periodic trigger: refresh the pending count and ask for a drain if there is work"""
        pending = self.queue.publish_count()
        if pending and self.monitor.is_online:
            self.request_drain()
        return pending

    def _on_enqueued(self, sender, operation, **kwargs):
        if self.monitor.is_online:
            self.request_drain()

    def _on_connectivity_changed(self, sender, is_online, **kwargs):
        if is_online:
            self.queue.publish_count()
            self.request_drain()

    # drain cycle

    def drain(self) -> DrainReport:
        report = DrainReport()

        if not self.monitor.is_online:
            report.reason = "offline"
            return report

        with self._guard:
            if self._draining:
                report.reason = "already draining"
                return report
            self._draining = True

        try:
            operations = self.queue.peek_all_ordered()
            if not operations:
                report.reason = "queue empty"
                return report

            report.started = True
            syncing_changed.send(sender=self, is_syncing=True)
            logger.info(f"Draining {len(operations)} queued operation(s)")

            abandoned = set()
            for operation in operations:
                if operation.id in abandoned:
                    continue

                outcome = self.replay(operation)
                report.record(outcome)

                if outcome is ReplayOutcome.DROPPED and operation.kind == OperationKind.CREATE:
                    for op_id in self.abandon_dependents(operation):
                        abandoned.add(op_id)
                        report.record(ReplayOutcome.DROPPED)

            logger.info(
                f"Drain finished: {report.outcomes['synced']} synced, {report.outcomes['not_ready']} deferred, "
                f"{report.outcomes['failed']} failed, {report.outcomes['dropped']} dropped"
            )
            self.last_report = report
            return report

        finally:
            with self._guard:
                self._draining = False
            if report.started:
                self.last_drain_at = timezone.now()
                syncing_changed.send(sender=self, is_syncing=False)
            self.queue.publish_count()

    def replay(self, operation) -> ReplayOutcome:
        handler = self.handlers[EntityKind(operation.entity_kind)]

        try:
            outcome = handler.apply(operation)
        except Exception as e:
            if not isinstance(e, RemoteError):
                logger.exception(f"Unexpected error replaying operation {operation.id}")
            # every failure counts toward the same ceiling
            dropped = self.queue.mark_attempt_failed(operation.id, str(e))
            handler.mark_error(operation.local_id)
            outcome = ReplayOutcome.DROPPED if dropped else ReplayOutcome.FAILED

        operation_replayed.send(sender=self, operation=operation, outcome=outcome)
        return outcome

    def abandon_dependents(self, operation) -> list:
        """
        Follow up on a dropped CREATE

        The record never reached the server, so its own UPDATE/DELETE and the
        CREATEs of its children can never resolve. Those operations are dropped
        too and every affected record is flagged as error. Returns the ids of
        the dropped operations.
        """
        error = f"{operation.entity_kind} {operation.local_id} was never created on the server"
        dropped = []
        pending = [(operation.entity_kind, operation.local_id)]

        while pending:
            entity_kind, local_id = pending.pop()
            if self.reconciler.resolve(entity_kind, local_id):
                continue

            handler = self.handlers[EntityKind(entity_kind)]
            dropped.extend(self.queue.drop_for_entity(entity_kind, local_id, error))
            handler.mark_error(local_id)
            pending.extend(handler.children(local_id))

        return dropped
