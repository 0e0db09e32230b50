import logging
from typing import Optional

from django.utils import timezone

from apps.core.models import SyncStatus
from apps.inspections.models import LocalDefect, LocalItem, LocalSession

from .models import EntityKind, IdentityMapping

logger = logging.getLogger(__name__)


ENTITY_MODELS = {
    EntityKind.SESSION: LocalSession,
    EntityKind.ITEM: LocalItem,
    EntityKind.DEFECT: LocalDefect,
}


def model_for(entity_kind: str):
    """Local store collection for an entity kind"""
    try:
        return ENTITY_MODELS[EntityKind(entity_kind)]
    except ValueError:
        raise ValueError(f"Unknown entity kind: {entity_kind}")


class IdentityReconciler:
    """
    Maps client-generated identifiers to server-assigned ones

    The mapping lives in its own table so it keeps resolving after the
    local record has been tombstoned
    """

    def bind(self, entity_kind: str, local_id: str, server_id: str) -> None:
        IdentityMapping.objects.update_or_create(
            entity_kind=entity_kind,
            local_id=local_id,
            defaults={"server_id": server_id},
        )

        model = model_for(entity_kind)
        updated = model.objects.filter(local_id=local_id).update(
            server_id=server_id,
            sync_status=SyncStatus.SYNCED,
            last_modified=timezone.now(),
        )
        if not updated:
            logger.warning(f"Bound {entity_kind} {local_id} -> {server_id} but no local record exists")
            return

        logger.info(f"Bound {entity_kind} {local_id} -> {server_id}")

    def resolve(self, entity_kind: str, local_id: str) -> Optional[str]:
        mapping = IdentityMapping.objects.filter(entity_kind=entity_kind, local_id=local_id).values_list("server_id", flat=True).first()
        if mapping:
            return mapping

        # records that came from the server carry their id without a binding
        return model_for(entity_kind).objects.filter(local_id=local_id).values_list("server_id", flat=True).first()
