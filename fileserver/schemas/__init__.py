"""Pydantic schemas for API requests and responses."""

from fileserver.schemas.files import (
    StoredFileResponse,
    PaginationResponse,
    ListFilesData,
    ListFilesResponse,
    UploadData,
    UploadResponse,
    DeleteFileData,
    DeleteFileResponse,
    BatchDeleteRequest,
    DeleteFailureResponse,
    BatchDeleteData,
    BatchDeleteResponse
)
from fileserver.schemas.system import HealthResponse, InfoData, InfoResponse
from fileserver.schemas.common import CamelModel, ErrorResponse

__all__ = [
    "StoredFileResponse",
    "PaginationResponse",
    "ListFilesData",
    "ListFilesResponse",
    "UploadData",
    "UploadResponse",
    "DeleteFileData",
    "DeleteFileResponse",
    "BatchDeleteRequest",
    "DeleteFailureResponse",
    "BatchDeleteData",
    "BatchDeleteResponse",
    "HealthResponse",
    "InfoData",
    "InfoResponse",
    "CamelModel",
    "ErrorResponse"
]
