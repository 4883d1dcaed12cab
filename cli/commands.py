"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    HealthCommand,
    InfoCommand,
    ListCommand,
    ServerCommand,
    UploadCommand,
)
from cli.config import Config
from cli.api_client import FileServerClient

logger = get_logger(__name__)


CONFIG_PATH = Path.home() / '.filedrop' / 'config.json'

_client: Optional[FileServerClient] = None


def get_client() -> FileServerClient:
    """
    Get or create global FileServerClient instance.

    Returns:
        FileServerClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new FileServerClient instance")
        _client = FileServerClient(Config(CONFIG_PATH))
    return _client


def handle_upload(cmd: UploadCommand, client: Optional[FileServerClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list
        client: Optional FileServerClient for dependency injection (testing)

    Returns:
        Upload results
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} file(s)")
    if client is None:
        client = get_client()
    return client.upload_files(list(cmd.file_list))


def handle_list(cmd: ListCommand, client: Optional[FileServerClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand with optional type and pagination
        client: Optional FileServerClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    logger.info(f"Executing list command: type={cmd.file_type} page={cmd.page} limit={cmd.limit}")
    if client is None:
        client = get_client()
    return client.list_files(cmd.file_type, cmd.page, cmd.limit)


def handle_delete(cmd: DeleteCommand, client: Optional[FileServerClient] = None) -> str:
    """
    Handle 'delete' command.

    A single name uses the single-file endpoint; several names go through
    one batch request.

    Args:
        cmd: DeleteCommand with filenames
        client: Optional FileServerClient for dependency injection (testing)

    Returns:
        Deletion results
    """
    if client is None:
        client = get_client()
    if len(cmd.filenames) == 1:
        return client.delete_file(cmd.filenames[0])
    return client.delete_files(list(cmd.filenames))


def handle_download(cmd: DownloadCommand, client: Optional[FileServerClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with filename and optional output_path
        client: Optional FileServerClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing download command: filename={cmd.filename} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    return client.download(cmd.filename, cmd.output_path)


def handle_info(cmd: InfoCommand, client: Optional[FileServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.info()


def handle_health(cmd: HealthCommand, client: Optional[FileServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.health()


def handle_server(cmd: ServerCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'server' command: save the new address and reconnect.

    Args:
        cmd: ServerCommand with host and port
        config: Optional Config for dependency injection (testing)

    Returns:
        Confirmation message
    """
    global _client
    if config is None:
        config = Config(CONFIG_PATH)
    config.set_server(cmd.host, cmd.port)
    if _client is not None:
        _client.close()
        _client = None
    return f"Server set to {config.get_base_url()}"
