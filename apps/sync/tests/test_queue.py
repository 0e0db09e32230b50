from datetime import timedelta

import pytest
from django.utils import timezone

from apps.sync.models import EntityKind, OperationKind, SyncOperation
from apps.sync.signals import operation_enqueued, pending_count_changed

pytestmark = pytest.mark.django_db


def test_enqueue_appends_fresh_operation(queue):
    operation = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {"productId": "p-1"})

    stored = SyncOperation.objects.get(id=operation.id)
    assert stored.kind == "CREATE"
    assert stored.entity_kind == "session"
    assert stored.local_id == "local-1"
    assert stored.server_id is None
    assert stored.payload == {"productId": "p-1"}
    assert stored.attempts == 0
    assert stored.last_error is None
    assert stored.created_at is not None


def test_enqueue_publishes_pending_count(queue):
    counts = []

    def receiver(sender, pending_count, **kwargs):
        counts.append(pending_count)

    pending_count_changed.connect(receiver, sender=queue)
    try:
        queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})
        queue.enqueue(OperationKind.UPDATE, EntityKind.SESSION, "local-1", {"status": "PAUSED"})
    finally:
        pending_count_changed.disconnect(receiver, sender=queue)

    assert counts == [1, 2]
    assert queue.pending_count == 2


def test_enqueue_announces_operation(queue):
    seen = []

    def receiver(sender, operation, **kwargs):
        seen.append(operation.local_id)

    operation_enqueued.connect(receiver, sender=queue)
    try:
        queue.enqueue(OperationKind.DELETE, EntityKind.DEFECT, "local-9", {}, server_id="srv-9")
    finally:
        operation_enqueued.disconnect(receiver, sender=queue)

    assert seen == ["local-9"]


def test_enqueue_rejects_unknown_kind(queue):
    with pytest.raises(ValueError):
        queue.enqueue("UPSERT", EntityKind.SESSION, "local-1", {})

    assert SyncOperation.objects.count() == 0


def test_peek_all_ordered_follows_creation_time_across_entities(queue):
    first = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})
    second = queue.enqueue(OperationKind.CREATE, EntityKind.ITEM, "local-2", {})
    third = queue.enqueue(OperationKind.CREATE, EntityKind.DEFECT, "local-3", {})

    # the defect was actually recorded first
    now = timezone.now()
    SyncOperation.objects.filter(id=third.id).update(created_at=now - timedelta(seconds=30))
    SyncOperation.objects.filter(id=first.id).update(created_at=now - timedelta(seconds=20))
    SyncOperation.objects.filter(id=second.id).update(created_at=now - timedelta(seconds=10))

    ordered = queue.peek_all_ordered()

    assert [op.id for op in ordered] == [third.id, first.id, second.id]


def test_peek_all_ordered_breaks_timestamp_ties_by_insertion(queue):
    same_time = timezone.now()
    ids = []
    for local_id in ("local-a", "local-b", "local-c"):
        operation = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, local_id, {})
        ids.append(operation.id)
    SyncOperation.objects.update(created_at=same_time)

    assert [op.id for op in queue.peek_all_ordered()] == ids


def test_peek_all_ordered_rereads_the_table(queue):
    queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})
    assert len(queue.peek_all_ordered()) == 1

    queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-2", {})
    assert len(queue.peek_all_ordered()) == 2


def test_mark_attempt_failed_counts_and_records_error(queue):
    operation = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})

    dropped = queue.mark_attempt_failed(operation.id, "HTTP 503")

    operation.refresh_from_db()
    assert dropped is False
    assert operation.attempts == 1
    assert operation.last_error == "HTTP 503"


def test_mark_attempt_failed_drops_at_ceiling(queue):
    operation = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})
    other = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-2", {})

    results = [queue.mark_attempt_failed(operation.id, f"failure {n}") for n in range(1, 6)]

    assert results == [False, False, False, False, True]
    assert not SyncOperation.objects.filter(id=operation.id).exists()
    assert SyncOperation.objects.get(id=other.id).attempts == 0
    assert queue.pending_count == 1


def test_mark_attempt_failed_on_missing_operation(queue):
    assert queue.mark_attempt_failed(12345, "gone") is False


def test_remove_deletes_operation(queue):
    operation = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})

    queue.remove(operation.id)

    assert queue.count() == 0


def test_has_pending_can_exclude_an_operation(queue):
    create = queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})

    assert queue.has_pending(EntityKind.SESSION, "local-1")
    assert not queue.has_pending(EntityKind.SESSION, "local-1", exclude_id=create.id)
    assert not queue.has_pending(EntityKind.ITEM, "local-1")


def test_drop_for_entity_removes_only_that_record(queue):
    queue.enqueue(OperationKind.UPDATE, EntityKind.SESSION, "local-1", {"activeTime": 5})
    queue.enqueue(OperationKind.DELETE, EntityKind.SESSION, "local-1", {})
    other = queue.enqueue(OperationKind.UPDATE, EntityKind.ITEM, "local-1", {"status": "OK"})

    dropped = queue.drop_for_entity(EntityKind.SESSION, "local-1", "parent never created")

    assert len(dropped) == 2
    assert [op.id for op in queue.peek_all_ordered()] == [other.id]
    assert queue.pending_count == 1
    assert queue.drop_for_entity(EntityKind.SESSION, "local-1", "again") == []
