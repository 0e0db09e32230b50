from .inspection_service import InspectionService
from .catalog_service import CatalogService
