"""File operation API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from common.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    STATIC_URL_PREFIX,
    WRITE_PIECE_SIZE,
)
from common.logging_config import get_logger
from common.naming import original_name_from_stored
from common.utils import format_file_size
from fileserver.classification import FileCategory, get_file_icon
from fileserver.config import ServerConfig
from fileserver.dependencies import get_base_url, get_catalog, get_config, get_gateway
from fileserver.exceptions import LimitExceededError
from fileserver.schemas.files import (
    BatchDeleteData,
    BatchDeleteRequest,
    BatchDeleteResponse,
    DeleteFailureResponse,
    DeleteFileData,
    DeleteFileResponse,
    ListFilesData,
    ListFilesResponse,
    PaginationResponse,
    StoredFileResponse,
    UploadData,
    UploadResponse,
)
from fileserver.services.catalog_service import CatalogService
from fileserver.services.storage_gateway import StorageGateway
from fileserver.types import StoredFile
from fileserver.upload_parser import UploadStreamParser

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


def to_file_response(stored: StoredFile, base_url: str) -> StoredFileResponse:
    """Map stored file metadata to its JSON representation."""
    return StoredFileResponse(
        name=stored.stored_name,
        original_name=stored.original_name,
        size=stored.size,
        size_formatted=format_file_size(stored.size),
        upload_date=stored.modified_at,
        type=stored.category.value,
        url=f"{base_url}{STATIC_URL_PREFIX}/{stored.stored_name}",
        extension=stored.extension,
        icon=get_file_icon(stored.original_name, stored.category),
    )


@router.get("/files", response_model=ListFilesResponse)
def list_files(
    type_filter: Optional[FileCategory] = Query(None, alias="type", description="Only files of this category"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1),
    catalog: CatalogService = Depends(get_catalog),
    base_url: str = Depends(get_base_url),
):
    """
    List stored files, most recent first.

    Parameters:
        - type: Optional category filter (image, video, audio, document,
          archive, executable, code, font, database, other)
        - page: 1-based page number (default 1)
        - limit: Page size (default 100)

    Returns:
        - files: File metadata for the requested page
        - pagination: current, limit, totalPages, totalFiles, hasNext, hasPrev

    Raises:
        - 400: Invalid type, page or limit
        - 500: Storage directory unreadable
    """
    result = catalog.list_files(type_filter=type_filter, page=page, limit=limit)

    return ListFilesResponse(
        data=ListFilesData(
            files=[to_file_response(f, base_url) for f in result.files],
            pagination=PaginationResponse(
                current=result.page,
                limit=result.limit,
                total_pages=result.total_pages,
                total_files=result.total_files,
                has_next=result.has_next,
                has_prev=result.has_prev,
            ),
        )
    )


@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    request: Request,
    config: ServerConfig = Depends(get_config),
    gateway: StorageGateway = Depends(get_gateway),
    base_url: str = Depends(get_base_url),
):
    """
    Upload one or more files of any type.

    Parameters:
        - files: Repeated multipart file field (1 to 50 parts)

    Returns:
        - files: Metadata of every stored file
        - totalSize: Sum of stored bytes

    Raises:
        - 400: No files, too many files, file too large, unexpected file field
        - 500: Storage directory not writable
    """
    _reject_oversized_body(request, config)

    parser = UploadStreamParser(
        request.headers.get("content-type", ""),
        max_file_size=config.max_file_size,
        max_files=config.max_files_per_request,
    )
    try:
        async for chunk in request.stream():
            await run_in_threadpool(parser.feed, chunk)
        parts = parser.finish()

        logger.debug(f"Upload request with {len(parts)} file part(s)")
        stored = await run_in_threadpool(gateway.upload, parts)
    finally:
        parser.close()

    total_size = sum(f.size for f in stored)

    return UploadResponse(
        message=f"Files uploaded successfully ({len(stored)})",
        data=UploadData(
            files=[to_file_response(f, base_url) for f in stored],
            total_size=total_size,
            total_size_formatted=format_file_size(total_size),
        ),
    )


def _reject_oversized_body(request: Request, config: ServerConfig) -> None:
    """Fail fast when the declared body cannot fit within the upload limits."""
    content_length = request.headers.get("content-length")
    if not content_length or not content_length.isdigit():
        return
    ceiling = config.max_file_size * config.max_files_per_request + WRITE_PIECE_SIZE
    if int(content_length) > ceiling:
        raise LimitExceededError(
            f"Request too large. Limit: {format_file_size(config.max_file_size)} per file"
        )


@router.delete("/files/batch", response_model=BatchDeleteResponse)
def delete_files(
    body: BatchDeleteRequest,
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Delete several files; each name succeeds or fails on its own.

    Parameters:
        - filenames: Stored names to delete

    Returns:
        - success: Names that were deleted
        - failed: {filename, error, code} for names that were not
        - deletedCount, failedCount

    Raises:
        - 400: Empty or malformed filenames list
    """
    result = catalog.delete_files(body.filenames)

    return BatchDeleteResponse(
        message=f"{result.deleted_count} file(s) deleted, {result.failed_count} failed",
        data=BatchDeleteData(
            success=result.deleted,
            failed=[
                DeleteFailureResponse(filename=f.filename, error=f.error, code=f.code)
                for f in result.failed
            ],
            deleted_count=result.deleted_count,
            failed_count=result.failed_count,
        ),
    )


@router.delete("/files/{filename:path}", response_model=DeleteFileResponse)
def delete_file(
    filename: str,
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Delete one stored file.

    Parameters:
        - filename: Stored name; must not contain "..", "/" or "\\"

    Raises:
        - 400: Invalid filename
        - 404: File not found
        - 500: Removal failed
    """
    deleted = catalog.delete_file(filename)

    return DeleteFileResponse(
        message="File deleted successfully",
        data=DeleteFileData(filename=deleted),
    )


@router.get("/files/{filename:path}/download")
def download_file(
    filename: str,
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Download a stored file as an attachment under its original name.

    Raises:
        - 400: Invalid filename
        - 404: File not found
    """
    path = catalog.resolve_existing(filename)

    return FileResponse(
        path,
        media_type="application/octet-stream",
        filename=original_name_from_stored(filename),
    )
