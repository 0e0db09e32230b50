import logging

from django.conf import settings
from django.db.models import F

from .models import OperationKind, SyncOperation
from .signals import operation_enqueued, pending_count_changed

logger = logging.getLogger(__name__)


class OperationQueue:
    """
    Durable FIFO log of pending mutations

    Replay order is the global creation order across all entity kinds, which
    is what keeps a parent's CREATE ahead of its children's
    """

    def __init__(self, max_attempts: int = None):  # type: ignore
        self.max_attempts = max_attempts or settings.SYNC_MAX_ATTEMPTS
        self.pending_count = 0

    def enqueue(self, kind: str, entity_kind: str, local_id: str, payload: dict, server_id: str = None) -> SyncOperation:  # type: ignore
        if kind not in OperationKind.values:
            raise ValueError(f"Invalid operation kind: {kind}")

        operation = SyncOperation.objects.create(
            kind=kind,
            entity_kind=entity_kind,
            local_id=local_id,
            server_id=server_id,
            payload=payload or {},
            attempts=0,
        )
        logger.info(f"Queued {kind} {entity_kind} {local_id} as operation {operation.id}")

        self.publish_count()
        operation_enqueued.send(sender=self, operation=operation)
        return operation

    def peek_all_ordered(self) -> list:
        """Fresh read of every pending operation, oldest first"""
        return list(SyncOperation.objects.order_by("created_at", "id"))

    def mark_attempt_failed(self, op_id: int, error: str) -> bool:
        """
        Record a failed replay
        Returns True when the operation hit the attempt ceiling and was dropped
        """
        updated = SyncOperation.objects.filter(id=op_id).update(attempts=F("attempts") + 1, last_error=error)
        if not updated:
            logger.warning(f"Operation {op_id} vanished before its failure could be recorded")
            return False

        operation = SyncOperation.objects.get(id=op_id)
        if operation.attempts < self.max_attempts:
            logger.warning(f"Operation {op_id} failed (attempt {operation.attempts}/{self.max_attempts}): {error}")
            return False

        logger.error(
            f"Dropping operation {op_id} ({operation.kind} {operation.entity_kind} {operation.local_id}) "
            f"after {operation.attempts} attempts: {error}"
        )
        operation.delete()
        self.publish_count()
        return True

    def drop_for_entity(self, entity_kind: str, local_id: str, error: str) -> list:
        """
        Discard every queued operation of one record
        Returns the ids of the dropped operations
        """
        operations = SyncOperation.objects.filter(entity_kind=entity_kind, local_id=local_id)
        op_ids = list(operations.values_list("id", flat=True))
        if not op_ids:
            return []

        operations.delete()
        logger.error(f"Dropping {len(op_ids)} operation(s) of {entity_kind} {local_id}: {error}")
        self.publish_count()
        return op_ids

    def remove(self, op_id: int) -> None:
        SyncOperation.objects.filter(id=op_id).delete()
        logger.info(f"Removed operation {op_id}")

    def count(self) -> int:
        return SyncOperation.objects.count()

    def has_pending(self, entity_kind: str, local_id: str, exclude_id: int = None) -> bool:  # type: ignore
        operations = SyncOperation.objects.filter(entity_kind=entity_kind, local_id=local_id)
        if exclude_id is not None:
            operations = operations.exclude(id=exclude_id)
        return operations.exists()

    def publish_count(self) -> int:
        self.pending_count = self.count()
        pending_count_changed.send(sender=self, pending_count=self.pending_count)
        return self.pending_count
