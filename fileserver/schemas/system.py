"""Pydantic schemas for health and server info endpoints."""

from typing import Dict

from fileserver.schemas.common import CamelModel


class HealthResponse(CamelModel):
    """Response model for the liveness probe."""
    success: bool = True
    message: str
    timestamp: str
    version: str
    features: str


class InfoData(CamelModel):
    """Aggregate storage statistics."""
    total_files: int
    total_size: int
    total_size_formatted: str
    upload_path: str
    max_file_size: int
    max_file_size_formatted: str
    max_files_per_request: int
    allowed_file_types: str
    files_by_type: Dict[str, int]


class InfoResponse(CamelModel):
    """Response model for server info."""
    success: bool = True
    data: InfoData
