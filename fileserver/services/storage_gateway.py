"""Storage gateway: persists uploaded parts under unique names."""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence, Tuple, BinaryIO

from common.constants import WRITE_PIECE_SIZE
from common.logging_config import get_logger
from common.naming import generate_stored_name
from common.utils import format_file_size
from fileserver.classification import classify, get_extension
from fileserver.config import ServerConfig
from fileserver.exceptions import LimitExceededError, StorageIOError, ValidationError
from fileserver.types import StoredFile, UploadPart

logger = get_logger(__name__)

MAX_NAME_ATTEMPTS = 5


class StorageGateway:
    def __init__(self, config: ServerConfig):
        self.config = config
        self.directory = config.upload_path

    def ensure_directory(self) -> bool:
        """
        Create the storage directory if it does not exist yet.

        Failures are logged and reported, never raised: the write that
        follows surfaces its own error to the request.

        Returns:
            True if the directory exists afterwards
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Storage directory ready: {self.directory}")
            return True
        except OSError as e:
            logger.error(f"Could not create storage directory {self.directory}: {e}")
            return False

    def upload(self, parts: Sequence[UploadPart]) -> List[StoredFile]:
        """
        Persist every part of one upload request.

        Count and declared sizes are checked before anything is written.
        If a later write fails, the files already written for this request
        are removed again, so the request is all-or-nothing.

        Args:
            parts: File parts received in the request

        Returns:
            Stored file metadata, in the order of the parts

        Raises:
            ValidationError: No parts were received
            LimitExceededError: Too many parts, or a part above max_file_size
            StorageIOError: The directory could not be written
        """
        self._check_limits(parts)
        self.ensure_directory()

        stored: List[StoredFile] = []
        try:
            for part in parts:
                stored.append(self._write_part(part))
        except Exception:
            if stored:
                logger.warning(
                    f"Upload aborted after {len(stored)} of {len(parts)} file(s), rolling back"
                )
                for stored_file in stored:
                    self._discard(self.directory / stored_file.stored_name)
            raise

        total = sum(f.size for f in stored)
        logger.info(f"Stored {len(stored)} file(s), {format_file_size(total)}")
        return stored

    def _check_limits(self, parts: Sequence[UploadPart]) -> None:
        if not parts:
            raise ValidationError("No files were uploaded")

        max_files = self.config.max_files_per_request
        if len(parts) > max_files:
            raise LimitExceededError(f"Too many files. Maximum {max_files} per request")

        for part in parts:
            if part.declared_size > self.config.max_file_size:
                raise LimitExceededError(self._size_limit_message(part.original_name))

    def _size_limit_message(self, name: str) -> str:
        return f"File too large: {name}. Limit: {format_file_size(self.config.max_file_size)}"

    def _open_unique(self, original_name: str) -> Tuple[str, BinaryIO]:
        """
        Open a new file under a freshly generated stored name.

        Exclusive creation guarantees an existing file is never
        overwritten; on a name clash a new token is drawn.
        """
        for _ in range(MAX_NAME_ATTEMPTS):
            stored_name = generate_stored_name(original_name)
            try:
                return stored_name, open(self.directory / stored_name, "xb")
            except FileExistsError:
                logger.warning(f"Stored name collision for {stored_name}, retrying")
        raise StorageIOError(f"Could not allocate a unique name for {original_name}")

    def _write_part(self, part: UploadPart) -> StoredFile:
        try:
            stored_name, handle = self._open_unique(part.original_name)
        except OSError as e:
            logger.error(f"Could not create file for {part.original_name}: {e}")
            raise StorageIOError(f"Error saving file {part.original_name}") from e

        path = self.directory / stored_name
        size = 0
        try:
            with handle:
                while True:
                    piece = part.stream.read(WRITE_PIECE_SIZE)
                    if not piece:
                        break
                    size += len(piece)
                    if size > self.config.max_file_size:
                        raise LimitExceededError(self._size_limit_message(part.original_name))
                    handle.write(piece)
        except LimitExceededError:
            self._discard(path)
            raise
        except OSError as e:
            logger.error(f"Write failed for {stored_name}: {e}")
            self._discard(path)
            raise StorageIOError(f"Error saving file {part.original_name}") from e

        logger.info(f"Stored {part.original_name} as {stored_name} ({format_file_size(size)})")
        if ".." in stored_name:
            logger.warning(
                f"Stored name {stored_name} contains \"..\" and cannot be deleted through the API"
            )

        return StoredFile(
            stored_name=stored_name,
            original_name=part.original_name,
            size=size,
            modified_at=_modified_at(path),
            category=classify(part.original_name),
            extension=get_extension(part.original_name),
        )

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
            logger.info(f"Removed {path.name}")
        except OSError as e:
            logger.error(f"Could not remove {path.name}: {e}")


def _modified_at(path: Path) -> datetime:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError:
        return datetime.now(timezone.utc)
