"""HTTP client for the file server API."""

import os
import sys
import time
import uuid
from contextlib import ExitStack
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from common.constants import MAX_FILES_PER_REQUEST, UPLOAD_FIELD_NAME
from common.logging_config import get_logger
from common.naming import original_name_from_stored
from common.utils import format_file_size
from cli.config import Config
from cli.constants import GREEN, RESET

logger = get_logger(__name__)


class FileServerClient:
    """HTTP client for the file server API with retry logic and error handling."""

    def __init__(self, config: Config):
        """
        Initialize API client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized FileServerClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, total_size: int) -> float:
        """
        Calculate timeout for an upload based on its total size.

        Args:
            total_size: Sum of file sizes in bytes

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        base_timeout = 30.0
        size_mb = total_size / (1024 * 1024)
        return base_timeout + size_mb * 0.1

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})
        kwargs['headers']['X-Request-ID'] = self.request_id

        logger.debug(
            f"Making request: {method} {endpoint} [request_id={self.request_id}]"
        )

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                    )
                    return response

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"Network error (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                    )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        if last_exception is not None:
            raise ConnectionError("Cannot connect to file server. Is it running?")
        raise ConnectionError("Max retries exceeded")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map an error envelope to a user-friendly message.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('error', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        if code in ('VALIDATION_ERROR', 'LIMIT_EXCEEDED', 'FILE_NOT_FOUND'):
            return detail

        error_messages = {
            'STORAGE_IO_ERROR': 'The server could not access its storage directory.',
            'INTERNAL_ERROR': 'Server error. Check the server logs.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            404: 'Not found',
            413: 'Request too large',
            500: 'Server error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def health(self) -> str:
        """
        Check that the server is up.

        Returns:
            Server status line
        """
        try:
            response = self._request_with_retry('GET', '/api/health')
            if response.status_code == 200:
                data = response.json()
                return f"Server OK (version {data['version']}, {data['timestamp']})"
            return f"Error: {self._format_error(response)}"
        except ConnectionError as e:
            return f"Error: {e}"

    def info(self) -> str:
        """
        Fetch storage statistics.

        Returns:
            Formatted statistics
        """
        try:
            response = self._request_with_retry('GET', '/api/info')
            if response.status_code != 200:
                return f"Error: {self._format_error(response)}"

            data = response.json()['data']
            lines = [
                f"Files: {data['totalFiles']} ({data['totalSizeFormatted']})",
                f"Storage path: {data['uploadPath']}",
                f"Max file size: {data['maxFileSizeFormatted']}, "
                f"max {data['maxFilesPerRequest']} files per upload",
            ]
            counts = [f"{t}={n}" for t, n in data.get('filesByType', {}).items() if n]
            if counts:
                lines.append(f"By type: {', '.join(counts)}")
            return '\n'.join(lines)

        except ConnectionError as e:
            return f"Error: {e}"

    def upload_files(self, file_paths: list[str]) -> str:
        """
        Upload local files in a single request.

        Args:
            file_paths: Paths of local files

        Returns:
            Formatted result with one line per stored file
        """
        if len(file_paths) > MAX_FILES_PER_REQUEST:
            return f"Error: Too many files. Maximum {MAX_FILES_PER_REQUEST} per upload"

        for file_path in file_paths:
            if not os.path.exists(file_path):
                return f"Error: File not found: {file_path}"
            if not os.path.isfile(file_path):
                return f"Error: Not a file: {file_path}"

        total_size = sum(os.path.getsize(p) for p in file_paths)
        upload_timeout = self._calculate_upload_timeout(total_size)

        logger.info(f"Uploading {len(file_paths)} file(s), {format_file_size(total_size)}")

        try:
            with ExitStack() as stack:
                files = [
                    (UPLOAD_FIELD_NAME, (os.path.basename(p), stack.enter_context(open(p, 'rb'))))
                    for p in file_paths
                ]
                response = self._request_with_retry(
                    'POST',
                    '/api/upload',
                    max_retries=0,
                    files=files,
                    timeout=upload_timeout
                )

            if response.status_code != 200:
                return f"Upload failed: {self._format_error(response)}"

            data = response.json()['data']
            output = [
                f"Uploaded: {f['originalName']} -> {f['name']} ({f['sizeFormatted']}, {f['type']})"
                for f in data['files']
            ]
            output.append(f"Total: {len(data['files'])} file(s), {data['totalSizeFormatted']}")
            return '\n'.join(output)

        except ConnectionError as e:
            return f"Error: {e}"
        except OSError as e:
            return f"Error reading file: {e}"

    def list_files(self, file_type: Optional[str] = None, page: int = 1, limit: int = 100) -> str:
        """
        List stored files.

        Args:
            file_type: Optional category filter
            page: 1-based page number
            limit: Page size

        Returns:
            Formatted list of files
        """
        params = {'page': page, 'limit': limit}
        if file_type:
            params['type'] = file_type

        try:
            response = self._request_with_retry('GET', '/api/files', params=params)

            if response.status_code != 200:
                return f"Error: {self._format_error(response)}"

            data = response.json()['data']
            files = data['files']
            pagination = data['pagination']

            if not files:
                scope = f"of type {file_type}" if file_type else "on the server"
                return f"No files found {scope}."

            output = [
                f"Page {pagination['current']}/{pagination['totalPages']} "
                f"({pagination['totalFiles']} file(s)):\n"
            ]
            for file_meta in files:
                output.append(
                    f"  - {file_meta['originalName']} [{file_meta['type']}]\n"
                    f"    Name: {file_meta['name']}\n"
                    f"    Size: {file_meta['sizeFormatted']}\n"
                    f"    Uploaded: {file_meta['uploadDate']}"
                )
            if pagination['hasNext']:
                output.append(f"\nMore files: list --page {pagination['current'] + 1}")

            return '\n'.join(output)

        except ConnectionError as e:
            return f"Error: {e}"

    def delete_file(self, filename: str) -> str:
        """
        Delete one stored file.

        Args:
            filename: Stored name

        Returns:
            Result message
        """
        try:
            response = self._request_with_retry(
                'DELETE',
                f"/api/files/{quote(filename, safe='')}"
            )

            if response.status_code == 200:
                return f"Deleted: {response.json()['data']['filename']}"
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"

    def delete_files(self, filenames: list[str]) -> str:
        """
        Delete several stored files in one batch request.

        Args:
            filenames: Stored names

        Returns:
            Per-name results and totals
        """
        try:
            response = self._request_with_retry(
                'DELETE',
                '/api/files/batch',
                json={'filenames': filenames}
            )

            if response.status_code != 200:
                return f"Error: {self._format_error(response)}"

            data = response.json()['data']
            output = [f"Deleted: {name}" for name in data['success']]
            output.extend(
                f"Failed: {item['filename']} ({item['error']})" for item in data['failed']
            )
            output.append(f"{data['deletedCount']} deleted, {data['failedCount']} failed")
            return '\n'.join(output)

        except ConnectionError as e:
            return f"Error: {e}"

    def download(self, filename: str, output_path: Optional[str] = None) -> str:
        """
        Download a stored file with progress feedback.

        Args:
            filename: Stored name
            output_path: Target file or directory (defaults to the current directory).
                Inside a directory the file is saved under its original name.

        Returns:
            Success message with download details
        """
        local_name = original_name_from_stored(filename) or filename
        output_file = Path(output_path) if output_path else Path.cwd()
        if output_file.is_dir():
            output_file = output_file / local_name

        try:
            url = f"/api/files/{quote(filename, safe='')}/download"

            with self.session.stream('GET', url) as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error: {self._format_error(response)}"

                output_file.parent.mkdir(parents=True, exist_ok=True)
                total_size = int(response.headers.get('Content-Length', 0))
                downloaded = 0

                with open(output_file, 'wb') as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
                        downloaded += len(chunk)
                        if total_size > 0:
                            progress = (downloaded / total_size) * 100
                            sys.stdout.write(
                                f"\rDownloading {filename}: {format_file_size(downloaded)} / {format_file_size(total_size)} ({GREEN}{progress:.1f}%{RESET})"
                            )
                            sys.stdout.flush()

                if total_size > 0:
                    sys.stdout.write('\n')
                    sys.stdout.flush()

            return f"Downloaded: {filename} ({format_file_size(downloaded)})\nSaved to: {output_file.absolute()}"

        except httpx.ConnectError:
            return "Error: Cannot connect to file server. Is it running?"
        except httpx.TimeoutException:
            return "Error: Request timed out. Server may be overloaded."
        except OSError as e:
            return f"Error writing file: {e}"

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
