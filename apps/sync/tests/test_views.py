import pytest
from django.apps import apps
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.sync.connectivity import ConnectivityMonitor
from apps.sync.engine import DebouncedScheduler
from apps.sync.models import EntityKind, OperationKind, SyncOperation
from apps.sync.services import SyncRuntime, get_runtime, set_runtime, start_background_sync

pytestmark = pytest.mark.django_db


@pytest.fixture
def runtime(api_client, queue):
    runtime = SyncRuntime(client=api_client, monitor=ConnectivityMonitor(initial=True), queue=queue, auto_drain=False)
    set_runtime(runtime)
    yield runtime
    set_runtime(None)


@pytest.fixture
def rest():
    return APIClient()


class TestSyncStatus:
    def test_reports_flags_and_pending_count(self, rest, runtime, queue):
        queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {"productId": "p-1"})

        response = rest.get(reverse("sync-status"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_online"] is True
        assert response.data["is_syncing"] is False
        assert response.data["pending_count"] == 1
        assert response.data["last_report"] is None


class TestConnectivity:
    def test_going_offline(self, rest, runtime):
        response = rest.post(reverse("sync-connectivity"), {"online": False}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["changed"] is True
        assert response.data["is_online"] is False
        assert runtime.monitor.is_online is False

    def test_repeated_report_changes_nothing(self, rest, runtime):
        response = rest.post(reverse("sync-connectivity"), {"online": True}, format="json")

        assert response.data["changed"] is False

    def test_online_flag_is_required(self, rest, runtime):
        response = rest.post(reverse("sync-connectivity"), {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestTrigger:
    def test_drains_and_returns_report(self, rest, runtime, queue, api_client):
        queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {"productId": "p-1", "workstationId": "w-1"})

        response = rest.post(reverse("sync-trigger"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["started"] is True
        assert response.data["synced"] == 1
        assert queue.count() == 0
        assert api_client.calls_for("POST") == [("POST", "/sessions", {"productId": "p-1", "workstationId": "w-1"})]

    def test_empty_queue(self, rest, runtime):
        response = rest.post(reverse("sync-trigger"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["started"] is False
        assert response.data["reason"] == "queue empty"

    def test_offline_station_refuses(self, rest, runtime, queue, api_client):
        runtime.monitor.set_online(False)
        queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})

        response = rest.post(reverse("sync-trigger"))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert api_client.calls == []
        assert queue.count() == 1


class TestOperations:
    def test_lists_queue_in_replay_order(self, rest, runtime, queue):
        queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})
        queue.enqueue(OperationKind.CREATE, EntityKind.ITEM, "local-2", {"localSessionId": "local-1", "sequence": 1})

        response = rest.get(reverse("sync-operation-list"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert [op["local_id"] for op in response.data["results"]] == ["local-1", "local-2"]

    def test_filters_by_entity_kind(self, rest, runtime, queue):
        queue.enqueue(OperationKind.CREATE, EntityKind.SESSION, "local-1", {})
        queue.enqueue(OperationKind.CREATE, EntityKind.ITEM, "local-2", {})

        response = rest.get(reverse("sync-operation-list"), {"entity_kind": "item"})

        assert [op["local_id"] for op in response.data["results"]] == ["local-2"]

    def test_queue_is_read_only(self, rest, runtime):
        response = rest.post(reverse("sync-operation-list"), {"kind": "CREATE"}, format="json")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


def test_set_runtime_replaces_process_runtime(api_client, queue):
    runtime = SyncRuntime(client=api_client, queue=queue, auto_drain=False)
    set_runtime(runtime)
    try:
        assert get_runtime() is runtime
    finally:
        set_runtime(None)


class TestBootStart:
    @pytest.fixture(autouse=True)
    def no_runtime(self):
        set_runtime(None)
        yield
        set_runtime(None)

    def test_disabled_without_auto_drain(self, settings):
        settings.SYNC_AUTO_DRAIN = False

        assert start_background_sync() is None
        assert apps.get_app_config("sync").runtime is None

    def test_leftover_work_is_scheduled_at_boot(self, settings, monkeypatch):
        settings.SYNC_AUTO_DRAIN = True
        settings.SYNC_POLL_INTERVAL = 0
        scheduled = []
        monkeypatch.setattr(DebouncedScheduler, "schedule", lambda self: scheduled.append(self))
        SyncOperation.objects.create(kind=OperationKind.CREATE, entity_kind=EntityKind.SESSION, local_id="local-1", payload={})

        runtime = start_background_sync()

        assert runtime is get_runtime()
        assert runtime.queue.pending_count == 1
        assert len(scheduled) == 1

    def test_database_error_defers_start(self, settings, monkeypatch):
        settings.SYNC_AUTO_DRAIN = True

        def broken(self):
            raise DatabaseError("no such table: sync_queue")

        monkeypatch.setattr(SyncRuntime, "start", broken)

        assert start_background_sync() is None
        assert apps.get_app_config("sync").runtime is None
