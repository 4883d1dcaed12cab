"""Project-wide constants (limits, defaults, API version)."""

API_VERSION: str = "1.0.0"

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 5000
DEFAULT_UPLOAD_PATH: str = "uploads"

DEFAULT_MAX_FILE_SIZE: int = 500 * 1024 * 1024  # 500 MiB per file
MAX_FILES_PER_REQUEST: int = 50

DEFAULT_PAGE: int = 1
DEFAULT_PAGE_LIMIT: int = 100

UPLOAD_FIELD_NAME: str = "files"
STATIC_URL_PREFIX: str = "/uploads"

WRITE_PIECE_SIZE: int = 1024 * 1024

DEFAULT_CORS_ORIGINS: tuple[str, ...] = (
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
)
