import logging
from apps.core.models import SyncStatus
from apps.inspections.models import Product, Workstation, DefectType
from apps.sync.client import ApiClient, RemoteError

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Keeps read-only reference data available offline
    Products, workstations and defect types are fetched while online and
    upserted into the station database
    """

    def __init__(self, client=None):
        self.client = client or ApiClient()

    def refresh(self) -> dict:
        """
        Pull every catalog from the central API

        Returns:
            dict of catalog name -> number of cached rows, or None when the
            fetch failed and the previous cache was kept
        """
        results = {}

        for name, endpoint, cache in (
            ("products", "/products", self.cache_products),
            ("workstations", "/workstations", self.cache_workstations),
            ("defect_types", "/defect-types", self.cache_defect_types),
        ):
            try:
                rows = self.client.get(endpoint) or []
            except RemoteError as e:
                logger.warning(f"Could not refresh {name}, serving cached copy: {str(e)}")
                results[name] = None
                continue

            results[name] = cache(rows)

        return results

    @staticmethod
    def cache_products(rows: list) -> int:
        products = [
            Product(
                id=str(row["id"]),
                code=row.get("code", ""),
                name=row.get("name", ""),
                template_url=row.get("templateUrl") or "",
                sync_status=SyncStatus.SYNCED,
            )
            for row in rows
        ]
        Product.objects.bulk_create(
            products,
            update_conflicts=True,
            unique_fields=["id"],
            update_fields=["code", "name", "template_url", "sync_status", "last_modified"],
        )
        logger.info(f"Cached {len(products)} products")
        return len(products)

    @staticmethod
    def cache_workstations(rows: list) -> int:
        workstations = [Workstation(id=str(row["id"]), name=row.get("name", ""), sync_status=SyncStatus.SYNCED) for row in rows]
        Workstation.objects.bulk_create(
            workstations,
            update_conflicts=True,
            unique_fields=["id"],
            update_fields=["name", "sync_status", "last_modified"],
        )
        logger.info(f"Cached {len(workstations)} workstations")
        return len(workstations)

    @staticmethod
    def cache_defect_types(rows: list) -> int:
        defect_types = [
            DefectType(
                id=str(row["id"]),
                code=row.get("code", ""),
                name=row.get("name", ""),
                color=row.get("color") or "",
                sync_status=SyncStatus.SYNCED,
            )
            for row in rows
        ]
        DefectType.objects.bulk_create(
            defect_types,
            update_conflicts=True,
            unique_fields=["id"],
            update_fields=["code", "name", "color", "sync_status", "last_modified"],
        )
        logger.info(f"Cached {len(defect_types)} defect types")
        return len(defect_types)
