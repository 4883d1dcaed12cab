"""FastAPI dependency providers."""

from fastapi import Request

from fileserver.config import ServerConfig
from fileserver.services.catalog_service import CatalogService
from fileserver.services.storage_gateway import StorageGateway


def get_config(request: Request) -> ServerConfig:
    return request.app.state.config


def get_gateway(request: Request) -> StorageGateway:
    return request.app.state.gateway


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_base_url(request: Request) -> str:
    """
    Scheme and host the client used to reach this server.

    File URLs are built from it so they resolve at the same origin that
    served the request.
    """
    host = request.headers.get("host") or request.url.netloc
    return f"{request.url.scheme}://{host}"
