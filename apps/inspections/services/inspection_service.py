from django.core.exceptions import ValidationError
from django.db.models import Max
from django.utils import timezone
from apps.core.models import SyncStatus
from apps.inspections.models import LocalSession, LocalItem, LocalDefect
from apps.sync.models import EntityKind, OperationKind
import logging

logger = logging.getLogger(__name__)


class InspectionService:
    """
    Local mutations made by the inspector

    Every change is written to the station database first with sync status
    "pending", then the matching operation is appended to the sync queue.
    Nothing here talks to the central API.
    """

    def __init__(self, queue=None):
        if queue is None:
            from apps.sync.services import get_runtime

            queue = get_runtime().queue
        self.queue = queue

    # sessions

    def start_session(self, product_id: str, workstation_id: str, user_id: str) -> LocalSession:
        """
        Open a new inspection run

        Args:
            product_id: server id of the inspected product
            workstation_id: server id of the workstation
            user_id: server id of the inspector

        Returns:
            Created LocalSession instance
        """
        if not product_id or not workstation_id:
            raise ValidationError("Product and workstation are required to start a session")

        session = LocalSession.objects.create(
            product_id=product_id,
            workstation_id=workstation_id,
            user_id=user_id,
            status=LocalSession.Status.OPEN,
            sync_status=SyncStatus.PENDING,
        )
        logger.info(f"Started session {session.local_id} for product {product_id}")

        self.queue.enqueue(
            OperationKind.CREATE,
            EntityKind.SESSION,
            session.local_id,
            {"productId": product_id, "workstationId": workstation_id},
        )
        return session

    def update_session(self, local_id: str, status: str = None, active_time: int = None) -> LocalSession:  # type: ignore
        """
        Change status and/or accumulated active time

        Raises:
            LocalSession.DoesNotExist: if the session is unknown or deleted
            ValidationError: on an invalid status change
        """
        session = LocalSession.objects.get(local_id=local_id, is_deleted=False)
        changes = {}

        if status is not None:
            if status not in LocalSession.Status.values:
                raise ValidationError(f"Invalid session status: {status}")
            if session.status == LocalSession.Status.CLOSED and status != LocalSession.Status.CLOSED:
                raise ValidationError("A closed session cannot be reopened")

            if status == LocalSession.Status.CLOSED and not session.ended_at:
                session.ended_at = timezone.now()
                logger.info(f"Session {local_id} closed.")
            session.status = status
            changes["status"] = status

        if active_time is not None:
            if active_time < 0:
                raise ValidationError("Active time cannot be negative")
            session.active_time = active_time
            changes["activeTime"] = active_time

        if not changes:
            return session

        session.sync_status = SyncStatus.PENDING
        session.save()

        self.queue.enqueue(OperationKind.UPDATE, EntityKind.SESSION, session.local_id, changes, server_id=session.server_id)
        return session

    def delete_session(self, local_id: str) -> LocalSession:
        session = LocalSession.objects.get(local_id=local_id, is_deleted=False)
        session.is_deleted = True
        session.sync_status = SyncStatus.PENDING
        session.save()
        logger.info(f"Deleted session {local_id} locally")

        self.queue.enqueue(OperationKind.DELETE, EntityKind.SESSION, session.local_id, {}, server_id=session.server_id)
        return session

    # items

    def add_item(self, session_local_id: str) -> LocalItem:
        """Advance to the next physical unit of a session"""
        session = LocalSession.objects.get(local_id=session_local_id, is_deleted=False)
        if session.status == LocalSession.Status.CLOSED:
            raise ValidationError("Cannot add items to a closed session")

        # deleted items keep their number so sequences stay monotonic
        last_sequence = session.items.aggregate(last=Max("sequence"))["last"] or 0

        item = LocalItem.objects.create(
            session=session,
            session_server_id=session.server_id,
            sequence=last_sequence + 1,
            status=LocalItem.Status.OK,
            sync_status=SyncStatus.PENDING,
        )
        logger.info(f"Added item #{item.sequence} ({item.local_id}) to session {session_local_id}")

        payload = {"localSessionId": session.local_id, "sequence": item.sequence}
        if session.server_id:
            payload["sessionId"] = session.server_id
        self.queue.enqueue(OperationKind.CREATE, EntityKind.ITEM, item.local_id, payload)
        return item

    def update_item(self, local_id: str, status: str) -> LocalItem:
        item = LocalItem.objects.get(local_id=local_id, is_deleted=False)
        if status not in LocalItem.Status.values:
            raise ValidationError(f"Invalid item status: {status}")

        item.status = status
        item.sync_status = SyncStatus.PENDING
        item.save()

        self.queue.enqueue(OperationKind.UPDATE, EntityKind.ITEM, item.local_id, {"status": status}, server_id=item.server_id)
        return item

    # defects

    def add_defect(
        self,
        item_local_id: str,
        defect_type_id: str,
        position_x: float,
        position_y: float,
        severity: str = None,  # type: ignore
        notes: str = None,  # type: ignore
    ) -> LocalDefect:
        """
        Mark a flaw on an item at a normalized canvas position

        Raises:
            LocalItem.DoesNotExist: if the item is unknown or deleted
            ValidationError: if a coordinate falls outside [0, 1]
        """
        item = LocalItem.objects.select_related("session").get(local_id=item_local_id, is_deleted=False)

        for name, value in (("position_x", position_x), ("position_y", position_y)):
            if value is None or not 0.0 <= float(value) <= 1.0:
                raise ValidationError(f"{name} must be between 0 and 1")
        if not defect_type_id:
            raise ValidationError("Defect type is required")

        defect = LocalDefect.objects.create(
            item=item,
            item_server_id=item.server_id,
            defect_type_id=defect_type_id,
            position_x=float(position_x),
            position_y=float(position_y),
            severity=severity,
            notes=notes,
            sync_status=SyncStatus.PENDING,
        )

        # mirrors the server, which flags the item itself when a defect is added
        if item.status != LocalItem.Status.DEFECTIVE:
            item.status = LocalItem.Status.DEFECTIVE
            item.save(update_fields=["status", "last_modified"])

        logger.info(f"Marked defect {defect.local_id} on item {item_local_id} at ({position_x:.3f}, {position_y:.3f})")

        payload = {
            "localItemId": item.local_id,
            "defectTypeId": defect_type_id,
            "positionX": float(position_x),
            "positionY": float(position_y),
        }
        if item.server_id:
            payload["itemId"] = item.server_id
        if severity is not None:
            payload["severity"] = severity
        if notes is not None:
            payload["notes"] = notes

        self.queue.enqueue(OperationKind.CREATE, EntityKind.DEFECT, defect.local_id, payload)
        return defect

    def delete_defect(self, local_id: str) -> LocalDefect:
        defect = LocalDefect.objects.select_related("item").get(local_id=local_id, is_deleted=False)
        defect.is_deleted = True
        defect.sync_status = SyncStatus.PENDING
        defect.save()

        item = defect.item
        if not item.defects.filter(is_deleted=False).exists() and item.status != LocalItem.Status.OK:
            item.status = LocalItem.Status.OK
            item.save(update_fields=["status", "last_modified"])

        logger.info(f"Deleted defect {local_id} locally")

        self.queue.enqueue(OperationKind.DELETE, EntityKind.DEFECT, defect.local_id, {}, server_id=defect.server_id)
        return defect
