"""Catalog service: lists, filters, paginates and deletes stored files."""

import math
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from common.logging_config import get_logger
from common.naming import original_name_from_stored
from fileserver.classification import FileCategory, classify, get_extension
from fileserver.config import ServerConfig
from fileserver.exceptions import (
    FileServerError,
    NotFoundError,
    StorageIOError,
    ValidationError,
)
from fileserver.types import (
    BatchDeleteResult,
    CatalogPage,
    DeleteFailure,
    StorageInfo,
    StoredFile,
)

logger = get_logger(__name__)

FORBIDDEN_NAME_PARTS = ("..", "/", "\\")


def validate_filename(name: str) -> None:
    """
    Reject names that could escape the storage directory.

    Args:
        name: Stored name supplied by a client

    Raises:
        ValidationError: Name is empty or contains "..", "/" or "\\"
    """
    if not name or any(part in name for part in FORBIDDEN_NAME_PARTS):
        raise ValidationError("Invalid filename")


class CatalogService:
    """
    Live view over the storage directory.

    Every call scans the directory again; nothing is cached, so the catalog
    always reflects what is on disk.
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self.directory = config.upload_path

    def scan(self) -> List[StoredFile]:
        """
        Read metadata for every regular file in the storage directory.

        Entries removed between listing and stat are skipped. A missing
        directory is an empty catalog.

        Returns:
            Stored files in directory enumeration order

        Raises:
            StorageIOError: The directory exists but cannot be read
        """
        if not self.directory.exists():
            return []

        files: List[StoredFile] = []
        try:
            with os.scandir(self.directory) as entries:
                for entry in entries:
                    stored = self._read_entry(entry)
                    if stored is not None:
                        files.append(stored)
        except OSError as e:
            logger.error(f"Error reading storage directory {self.directory}: {e}")
            raise StorageIOError("Error reading files from the server") from e
        return files

    def _read_entry(self, entry: os.DirEntry) -> Optional[StoredFile]:
        try:
            if not entry.is_file():
                return None
            stat = entry.stat()
        except FileNotFoundError:
            return None

        return StoredFile(
            stored_name=entry.name,
            original_name=original_name_from_stored(entry.name),
            size=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            category=classify(entry.name),
            extension=get_extension(entry.name),
        )

    def list_files(
        self,
        type_filter: Optional[FileCategory] = None,
        page: int = 1,
        limit: int = 100,
    ) -> CatalogPage:
        """
        Return one page of the catalog, most recently modified first.

        Args:
            type_filter: Keep only files of this category
            page: 1-based page number
            limit: Page size

        Returns:
            CatalogPage with the slice and navigation flags

        Raises:
            ValidationError: page or limit below 1
        """
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if limit < 1:
            raise ValidationError("limit must be 1 or greater")

        files = self.scan()
        if type_filter is not None:
            files = [f for f in files if f.category == type_filter]

        files.sort(key=lambda f: f.modified_at, reverse=True)

        total = len(files)
        start = (page - 1) * limit
        end = start + limit

        return CatalogPage(
            files=files[start:end],
            page=page,
            limit=limit,
            total_files=total,
            total_pages=math.ceil(total / limit),
            has_next=end < total,
            has_prev=start > 0,
        )

    def storage_info(self) -> StorageInfo:
        """Aggregate file count, size and per-category counts."""
        files = self.scan()

        files_by_type: Dict[str, int] = {category.value: 0 for category in FileCategory}
        for stored in files:
            files_by_type[stored.category.value] += 1

        return StorageInfo(
            total_files=len(files),
            total_size=sum(f.size for f in files),
            upload_path=str(self.directory),
            max_file_size=self.config.max_file_size,
            max_files_per_request=self.config.max_files_per_request,
            files_by_type=files_by_type,
        )

    def resolve_existing(self, name: str) -> Path:
        """
        Validate a client-supplied name and resolve it to an existing file.

        Raises:
            ValidationError: Name fails the traversal guard
            NotFoundError: No regular file with that name
        """
        validate_filename(name)
        path = self.directory / name
        if not path.is_file():
            raise NotFoundError(f"File not found: {name}")
        return path

    def delete_file(self, name: str) -> str:
        """
        Delete one stored file.

        A file removed concurrently between the existence check and the
        unlink is reported as not found.

        Args:
            name: Stored name

        Returns:
            The deleted name

        Raises:
            ValidationError: Name fails the traversal guard
            NotFoundError: File does not exist
            StorageIOError: Removal failed for another reason
        """
        path = self.resolve_existing(name)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {name}") from e
        except OSError as e:
            logger.error(f"Error deleting {name}: {e}")
            raise StorageIOError(f"Error deleting file {name}") from e

        logger.info(f"Deleted {name}")
        return name

    def delete_files(self, names: Iterable[str]) -> BatchDeleteResult:
        """
        Delete several stored files independently.

        Each name goes through the same checks as delete_file; one failure
        never stops the others. Duplicate names are processed once.

        Args:
            names: Stored names

        Returns:
            BatchDeleteResult with deleted names and per-name failures

        Raises:
            ValidationError: No names were given
        """
        unique_names = list(dict.fromkeys(names))
        if not unique_names:
            raise ValidationError("No filenames provided")

        result = BatchDeleteResult()
        for name in unique_names:
            try:
                result.deleted.append(self.delete_file(name))
            except FileServerError as e:
                result.failed.append(DeleteFailure(filename=name, error=str(e), code=e.code))

        logger.info(
            f"Batch delete finished: {result.deleted_count} deleted, {result.failed_count} failed"
        )
        return result
