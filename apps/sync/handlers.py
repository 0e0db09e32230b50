import enum
import logging

from django.utils import timezone

from apps.core.models import SyncStatus
from apps.inspections.models import LocalDefect, LocalItem, LocalSession

from .client import RemoteError
from .models import EntityKind, OperationKind

logger = logging.getLogger(__name__)


class ReplayOutcome(enum.Enum):
    SYNCED = "synced"
    NOT_READY = "not_ready"
    FAILED = "failed"
    DROPPED = "dropped"


class EntityHandler:
    """
    Replays queued operations for one entity kind

    Subclasses describe the endpoints and, for children, how the parent's
    server id is found at replay time
    """

    entity_kind = None
    model = None

    def __init__(self, client, queue, reconciler):
        self.client = client
        self.queue = queue
        self.reconciler = reconciler

    def apply(self, operation) -> ReplayOutcome:
        if operation.kind == OperationKind.CREATE:
            return self.create(operation)
        elif operation.kind == OperationKind.UPDATE:
            return self.update(operation)
        elif operation.kind == OperationKind.DELETE:
            return self.delete(operation)
        raise ValueError(f"Invalid operation kind: {operation.kind}")

    # endpoints

    def create_endpoint(self, operation, parent_server_id):
        raise NotImplementedError

    def detail_endpoint(self, server_id: str) -> str:
        raise NotImplementedError

    def resolve_parent(self, operation):
        """Server id of the parent record, or None when it isn't known yet"""
        return None

    def after_create(self, operation, parent_server_id) -> None:
        pass

    def children(self, local_id: str) -> list:
        """(entity kind, local id) of records whose CREATE needs this one on the server"""
        return []

    # replay

    def create(self, operation) -> ReplayOutcome:
        parent_server_id = self.resolve_parent(operation)
        endpoint = self.create_endpoint(operation, parent_server_id)
        if endpoint is None:
            logger.debug(f"Deferring CREATE {self.entity_kind} {operation.local_id}: parent not on the server yet")
            return ReplayOutcome.NOT_READY

        data = self.client.post(endpoint, self.request_body(operation, parent_server_id))
        server_id = data.get("id") if isinstance(data, dict) else None
        if not server_id:
            raise RemoteError(f"Create response for {self.entity_kind} {operation.local_id} carries no id")

        self.reconciler.bind(self.entity_kind, operation.local_id, str(server_id))
        self.after_create(operation, parent_server_id)
        self._complete(operation)
        return ReplayOutcome.SYNCED

    def update(self, operation) -> ReplayOutcome:
        server_id = self.resolve_server_id(operation)
        if not server_id:
            logger.debug(f"Deferring UPDATE {self.entity_kind} {operation.local_id}: no server id yet")
            return ReplayOutcome.NOT_READY

        self.client.patch(self.detail_endpoint(server_id), self.request_body(operation))
        self._complete(operation)
        return ReplayOutcome.SYNCED

    def delete(self, operation) -> ReplayOutcome:
        server_id = self.resolve_server_id(operation)
        if not server_id:
            logger.debug(f"Deferring DELETE {self.entity_kind} {operation.local_id}: no server id yet")
            return ReplayOutcome.NOT_READY

        self.client.delete(self.detail_endpoint(server_id))
        self._complete(operation, is_deleted=True)
        return ReplayOutcome.SYNCED

    def resolve_server_id(self, operation):
        return self.reconciler.resolve(self.entity_kind, operation.local_id) or operation.server_id

    def request_body(self, operation, parent_server_id=None) -> dict:
        # local references never leave the station
        return {key: value for key, value in (operation.payload or {}).items() if not key.startswith("local")}

    def mark_error(self, local_id: str) -> None:
        self.model.objects.filter(local_id=local_id).update(sync_status=SyncStatus.ERROR, last_modified=timezone.now())

    def _complete(self, operation, **fields) -> None:
        self.queue.remove(operation.id)

        # later edits of the same record keep it pending
        if self.queue.has_pending(self.entity_kind, operation.local_id):
            fields["sync_status"] = SyncStatus.PENDING
        else:
            fields["sync_status"] = SyncStatus.SYNCED
        self.model.objects.filter(local_id=operation.local_id).update(last_modified=timezone.now(), **fields)


class SessionHandler(EntityHandler):
    entity_kind = EntityKind.SESSION
    model = LocalSession

    def create_endpoint(self, operation, parent_server_id):
        return "/sessions"

    def detail_endpoint(self, server_id):
        return f"/sessions/{server_id}"

    def children(self, local_id):
        return [(EntityKind.ITEM, item_id) for item_id in LocalItem.objects.filter(session_id=local_id).values_list("local_id", flat=True)]


class ItemHandler(EntityHandler):
    entity_kind = EntityKind.ITEM
    model = LocalItem

    def resolve_parent(self, operation):
        payload = operation.payload or {}
        local_session_id = payload.get("localSessionId")
        if local_session_id:
            resolved = self.reconciler.resolve(EntityKind.SESSION, local_session_id)
            if resolved:
                return resolved
        return payload.get("sessionId")

    def create_endpoint(self, operation, parent_server_id):
        if not parent_server_id:
            return None
        return f"/sessions/{parent_server_id}/items"

    def detail_endpoint(self, server_id):
        return f"/sessions/items/{server_id}"

    def request_body(self, operation, parent_server_id=None):
        body = super().request_body(operation, parent_server_id)
        if parent_server_id:
            body["sessionId"] = parent_server_id
        return body

    def after_create(self, operation, parent_server_id):
        LocalItem.objects.filter(local_id=operation.local_id).update(session_server_id=parent_server_id)

    def children(self, local_id):
        return [(EntityKind.DEFECT, defect_id) for defect_id in LocalDefect.objects.filter(item_id=local_id).values_list("local_id", flat=True)]


class DefectHandler(EntityHandler):
    entity_kind = EntityKind.DEFECT
    model = LocalDefect

    def resolve_parent(self, operation):
        payload = operation.payload or {}
        local_item_id = payload.get("localItemId")
        if local_item_id:
            resolved = self.reconciler.resolve(EntityKind.ITEM, local_item_id)
            if resolved:
                return resolved
        return payload.get("itemId")

    def create_endpoint(self, operation, parent_server_id):
        if not parent_server_id:
            return None
        return f"/sessions/items/{parent_server_id}/defects"

    def detail_endpoint(self, server_id):
        return f"/sessions/defects/{server_id}"

    def request_body(self, operation, parent_server_id=None):
        body = super().request_body(operation, parent_server_id)
        if parent_server_id:
            body["itemId"] = parent_server_id
        return body

    def after_create(self, operation, parent_server_id):
        LocalDefect.objects.filter(local_id=operation.local_id).update(item_server_id=parent_server_id)


HANDLER_CLASSES = {
    EntityKind.SESSION: SessionHandler,
    EntityKind.ITEM: ItemHandler,
    EntityKind.DEFECT: DefectHandler,
}
