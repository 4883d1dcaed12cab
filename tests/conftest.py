"""Shared pytest fixtures for all tests."""

import os

import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from fileserver.config import ServerConfig
from fileserver.main import create_app
from fileserver.services.catalog_service import CatalogService
from fileserver.services.storage_gateway import StorageGateway


@pytest.fixture
def upload_dir(tmp_path):
    """
    Create an empty storage directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the storage directory
    """
    directory = tmp_path / 'uploads'
    directory.mkdir()
    return directory


@pytest.fixture
def server_config(upload_dir):
    """Server configuration pointing at the temporary storage directory."""
    return ServerConfig(upload_path=upload_dir)


@pytest.fixture
def gateway(server_config):
    return StorageGateway(server_config)


@pytest.fixture
def catalog(server_config):
    return CatalogService(server_config)


@pytest.fixture
def client(server_config):
    """
    FastAPI test client with lifespan events running.
    """
    app = create_app(server_config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_stored_file(upload_dir):
    """
    Factory writing a file into the storage directory with a given mtime.

    Returns:
        Callable(name, content=b'data', mtime=None) -> Path
    """
    def _make(name, content=b'data', mtime=None):
        path = upload_dir / name
        path.write_bytes(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary CLI config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .filedrop directory
    """
    config_dir = tmp_path / '.filedrop'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary CLI config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def multiple_sample_files(tmp_path):
    """
    Create multiple sample files for testing bulk operations.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        List of Paths to sample files
    """
    files = []
    for i in range(3):
        file_path = tmp_path / f'test{i}.txt'
        file_path.write_text(f'Sample content {i}')
        files.append(file_path)
    return files
