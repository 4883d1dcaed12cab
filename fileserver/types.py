"""File server data type definitions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Dict, List

from fileserver.classification import FileCategory


@dataclass(frozen=True)
class UploadPart:
    """
    One file part of an upload request.
    """
    original_name: str
    stream: BinaryIO
    declared_size: int


@dataclass(frozen=True)
class StoredFile:
    """
    A file as it exists in the storage directory.
    """
    stored_name: str
    original_name: str
    size: int
    modified_at: datetime
    category: FileCategory
    extension: str


@dataclass(frozen=True)
class CatalogPage:
    """
    One page of the catalog plus the numbers needed to navigate it.
    """
    files: List[StoredFile]
    page: int
    limit: int
    total_files: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class StorageInfo:
    """
    Aggregate statistics over the storage directory.
    """
    total_files: int
    total_size: int
    upload_path: str
    max_file_size: int
    max_files_per_request: int
    files_by_type: Dict[str, int]


@dataclass(frozen=True)
class DeleteFailure:
    filename: str
    error: str
    code: str


@dataclass
class BatchDeleteResult:
    """
    Per-name outcome of a batch delete.
    """
    deleted: List[str] = field(default_factory=list)
    failed: List[DeleteFailure] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
