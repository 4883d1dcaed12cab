"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UploadCommand:
    """Upload local files."""

    file_list: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ListCommand:
    """List stored files, optionally filtered by type."""

    file_type: str | None = None
    page: int = 1
    limit: int = 100
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete one or more stored files."""

    filenames: tuple[str, ...]
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class DownloadCommand:
    """Download a stored file."""

    filename: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class InfoCommand:
    """Show storage statistics."""

    command: Literal["info"] = "info"


@dataclass(frozen=True)
class HealthCommand:
    """Check server liveness."""

    command: Literal["health"] = "health"


@dataclass(frozen=True)
class ServerCommand:
    """Change the server the CLI talks to."""

    host: str
    port: int
    command: Literal["server"] = "server"


CommandRequest = (
    UploadCommand
    | ListCommand
    | DeleteCommand
    | DownloadCommand
    | InfoCommand
    | HealthCommand
    | ServerCommand
)
