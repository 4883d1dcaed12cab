"""Entry point for the file server."""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.constants import API_VERSION, STATIC_URL_PREFIX
from common.logging_config import setup_logging
from common.utils import format_file_size
from fileserver.config import ServerConfig
from fileserver.exceptions import (
    FileServerError,
    LimitExceededError,
    NotFoundError,
    StorageIOError,
    ValidationError,
)
from fileserver.routes.file_routes import router as file_router
from fileserver.routes.system_routes import router as system_router
from fileserver.schemas.common import ErrorResponse
from fileserver.services.catalog_service import CatalogService
from fileserver.services.storage_gateway import StorageGateway

logger = setup_logging('fileserver')


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code).model_dump()
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Prepare the storage directory on startup.
    """
    config: ServerConfig = app.state.config

    logger.info("File server starting up...")
    app.state.gateway.ensure_directory()
    logger.info(f"Serving files from: {config.upload_path}")
    logger.info(
        f"Limits: {format_file_size(config.max_file_size)} per file, "
        f"{config.max_files_per_request} files per request"
    )

    yield

    logger.info("File server shutting down...")


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


async def validation_error_handler(request: Request, exc: ValidationError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Validation error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), exc.code)


async def limit_exceeded_handler(request: Request, exc: LimitExceededError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Limit exceeded: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), exc.code)


async def not_found_handler(request: Request, exc: NotFoundError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"File not found error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_404_NOT_FOUND, str(exc), exc.code)


async def storage_io_error_handler(request: Request, exc: StorageIOError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Storage I/O error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), exc.code)


async def file_server_error_handler(request: Request, exc: FileServerError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"File server error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return _error_response(exc.status_code, str(exc), exc.code)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    logger.warning(
        f"Request validation error: {details} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST, f"Invalid request: {details}", "VALIDATION_ERROR"
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"HTTP error {exc.status_code}: {exc.detail} [request_id={request_id}] path={request.url.path}"
    )
    code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "HTTP_ERROR"
    return _error_response(exc.status_code, str(exc.detail), code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Unhandled error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR"
    )


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Server settings; read from the environment when omitted

    Returns:
        Configured FastAPI instance
    """
    if config is None:
        config = ServerConfig.from_env()

    app = FastAPI(
        title="Filedrop File Server",
        description="Personal file storage server with a typed, paginated catalog",
        version=API_VERSION,
        lifespan=lifespan
    )

    app.state.config = config
    app.state.gateway = StorageGateway(config)
    app.state.catalog = CatalogService(config)

    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(LimitExceededError, limit_exceeded_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageIOError, storage_io_error_handler)
    app.add_exception_handler(FileServerError, file_server_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(system_router)
    app.include_router(file_router)

    app.mount(
        STATIC_URL_PREFIX,
        StaticFiles(directory=config.upload_path, check_dir=False),
        name="uploads"
    )

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    config: ServerConfig = app.state.config
    uvicorn.run(
        "fileserver.main:app",
        host=config.host,
        port=config.port
    )


if __name__ == "__main__":
    main()
