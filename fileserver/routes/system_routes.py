"""Health and server info routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from common.constants import API_VERSION
from common.utils import format_file_size
from fileserver.dependencies import get_catalog
from fileserver.schemas.system import HealthResponse, InfoData, InfoResponse
from fileserver.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["System"])

ALL_TYPES_ALLOWED = "All file types allowed"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness probe. Returns 200 while the process is serving requests.
    """
    return HealthResponse(
        message="File server running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=API_VERSION,
        features=ALL_TYPES_ALLOWED,
    )


@router.get("/info", response_model=InfoResponse)
def server_info(catalog: CatalogService = Depends(get_catalog)):
    """
    Storage statistics: file count, total size, limits and per-type counts.

    Raises:
        - 500: Storage directory unreadable
    """
    info = catalog.storage_info()

    return InfoResponse(
        data=InfoData(
            total_files=info.total_files,
            total_size=info.total_size,
            total_size_formatted=format_file_size(info.total_size),
            upload_path=info.upload_path,
            max_file_size=info.max_file_size,
            max_file_size_formatted=format_file_size(info.max_file_size),
            max_files_per_request=info.max_files_per_request,
            allowed_file_types=ALL_TYPES_ALLOWED,
            files_by_type=info.files_by_type,
        )
    )
