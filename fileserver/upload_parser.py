"""Incremental multipart parser for upload requests.

The request body is fed chunk by chunk as it arrives. Part limits are
enforced while parsing, so an oversized file or one part too many stops the
request before the rest of the body is read.
"""

from tempfile import SpooledTemporaryFile
from typing import List, Optional, Tuple

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from common.constants import UPLOAD_FIELD_NAME, WRITE_PIECE_SIZE
from common.logging_config import get_logger
from common.utils import format_file_size
from fileserver.exceptions import LimitExceededError, ValidationError
from fileserver.types import UploadPart

logger = get_logger(__name__)

MULTIPART_CONTENT_TYPE = b"multipart/form-data"


class UploadStreamParser:
    """
    Collects the file parts of one multipart upload into spooled temp files.

    Non-file fields are skipped. A file part under any field name other than
    the upload field is rejected.

    Args:
        content_type: Value of the request's Content-Type header
        max_file_size: Largest accepted part, in bytes
        max_files: Largest accepted number of file parts

    Raises:
        ValidationError: Body is not multipart/form-data or has no boundary
    """

    def __init__(self, content_type: str, max_file_size: int, max_files: int):
        self.max_file_size = max_file_size
        self.max_files = max_files

        media_type, params = parse_options_header(content_type)
        if media_type != MULTIPART_CONTENT_TYPE:
            raise ValidationError("No files were uploaded")
        boundary = params.get(b"boundary")
        if not boundary:
            raise ValidationError("Missing multipart boundary")

        self.parts: List[UploadPart] = []
        self._headers: List[Tuple[bytes, bytes]] = []
        self._header_field = b""
        self._header_value = b""
        self._name: Optional[str] = None
        self._file: Optional[SpooledTemporaryFile] = None
        self._size = 0
        self._complete = False

        self._parser = MultipartParser(
            boundary,
            {
                "on_part_begin": self._on_part_begin,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
                "on_end": self._on_end,
            },
        )

    def feed(self, chunk: bytes) -> None:
        """
        Parse the next piece of the body.

        Raises:
            ValidationError: Malformed body, or a file part under an unexpected field name
            LimitExceededError: Too many file parts, or a part above max_file_size
        """
        if not chunk:
            return
        try:
            self._parser.write(chunk)
        except MultipartParseError as e:
            raise ValidationError(f"Malformed multipart body: {e}") from e

    def finish(self) -> List[UploadPart]:
        """
        Return the collected parts once the whole body has been fed.

        Raises:
            ValidationError: The body ended before the closing boundary
        """
        if not self._complete:
            raise ValidationError("Incomplete multipart body")
        return self.parts

    def close(self) -> None:
        """Release every temp file, including a partially received one."""
        if self._file is not None:
            self._file.close()
            self._file = None
        for part in self.parts:
            part.stream.close()

    def _on_part_begin(self) -> None:
        self._headers = []
        self._name = None
        self._file = None
        self._size = 0

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers.append((self._header_field.lower(), self._header_value))
        self._header_field = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        disposition = dict(self._headers).get(b"content-disposition", b"")
        _, options = parse_options_header(disposition)
        filename = options.get(b"filename")
        if filename is None:
            return

        field_name = options.get(b"name", b"").decode("utf-8", errors="replace")
        if field_name != UPLOAD_FIELD_NAME:
            raise ValidationError("Unexpected file field")
        if len(self.parts) >= self.max_files:
            raise LimitExceededError(f"Too many files. Maximum {self.max_files} per request")

        self._name = filename.decode("utf-8", errors="replace")
        self._file = SpooledTemporaryFile(max_size=WRITE_PIECE_SIZE)

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._file is None:
            return
        self._size += end - start
        if self._size > self.max_file_size:
            logger.warning(f"Upload of {self._name} stopped above {self._size} bytes")
            raise LimitExceededError(
                f"File too large: {self._name}. Limit: {format_file_size(self.max_file_size)}"
            )
        self._file.write(data[start:end])

    def _on_part_end(self) -> None:
        if self._file is None:
            return
        self._file.seek(0)
        self.parts.append(
            UploadPart(original_name=self._name, stream=self._file, declared_size=self._size)
        )
        self._file = None

    def _on_end(self) -> None:
        self._complete = True
