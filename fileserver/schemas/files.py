"""Pydantic schemas for file operation endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from fileserver.schemas.common import CamelModel


class StoredFileResponse(CamelModel):
    """Metadata of one stored file."""
    name: str
    original_name: str
    size: int
    size_formatted: str
    upload_date: Optional[datetime] = None
    type: str
    url: str
    extension: str
    icon: str


class PaginationResponse(CamelModel):
    """Navigation data for a catalog page."""
    current: int
    limit: int
    total_pages: int
    total_files: int
    has_next: bool
    has_prev: bool


class ListFilesData(CamelModel):
    files: List[StoredFileResponse]
    pagination: PaginationResponse


class ListFilesResponse(CamelModel):
    """Response model for file listing."""
    success: bool = True
    data: ListFilesData


class UploadData(CamelModel):
    files: List[StoredFileResponse]
    total_size: int
    total_size_formatted: str


class UploadResponse(CamelModel):
    """Response model for file upload."""
    success: bool = True
    message: str
    data: UploadData


class DeleteFileData(CamelModel):
    filename: str


class DeleteFileResponse(CamelModel):
    """Response model for single file deletion."""
    success: bool = True
    message: str
    data: DeleteFileData


class BatchDeleteRequest(BaseModel):
    """Request model for batch deletion."""
    filenames: List[str]


class DeleteFailureResponse(CamelModel):
    filename: str
    error: str
    code: str


class BatchDeleteData(CamelModel):
    success: List[str]
    failed: List[DeleteFailureResponse]
    deleted_count: int
    failed_count: int


class BatchDeleteResponse(CamelModel):
    """Response model for batch deletion."""
    success: bool = True
    message: str
    data: BatchDeleteData
