"""Configuration settings for the file server."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from common.constants import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_PORT,
    DEFAULT_UPLOAD_PATH,
    MAX_FILES_PER_REQUEST,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ServerConfig:
    """
    Server settings, built once at process start and handed to the
    storage gateway and the catalog service.
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    upload_path: Path = Path(DEFAULT_UPLOAD_PATH)
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_files_per_request: int = MAX_FILES_PER_REQUEST
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    def __post_init__(self):
        if not isinstance(self.upload_path, Path):
            object.__setattr__(self, "upload_path", Path(self.upload_path))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build configuration from environment variables.

        Recognized: HOST, PORT, UPLOAD_PATH, MAX_FILE_SIZE,
        MAX_FILES_PER_REQUEST, CORS_ORIGINS (comma-separated).
        """
        if environ is None:
            environ = os.environ

        cors_raw = environ.get("CORS_ORIGINS")
        if cors_raw:
            cors_origins = tuple(o.strip() for o in cors_raw.split(",") if o.strip())
        else:
            cors_origins = DEFAULT_CORS_ORIGINS

        return cls(
            host=environ.get("HOST", DEFAULT_HOST),
            port=_read_int(environ, "PORT", DEFAULT_PORT),
            upload_path=Path(environ.get("UPLOAD_PATH", DEFAULT_UPLOAD_PATH)),
            max_file_size=_read_int(environ, "MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
            max_files_per_request=_read_int(
                environ, "MAX_FILES_PER_REQUEST", MAX_FILES_PER_REQUEST
            ),
            cors_origins=cors_origins,
        )


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"Non-positive value for {name}={value}, using default {default}")
        return default
    return value
