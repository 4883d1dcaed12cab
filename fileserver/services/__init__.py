"""Service layer for storage and catalog logic."""

from fileserver.services.catalog_service import CatalogService
from fileserver.services.storage_gateway import StorageGateway

__all__ = [
    "CatalogService",
    "StorageGateway",
]
