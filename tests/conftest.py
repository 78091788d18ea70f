"""Shared pytest fixtures for Neighbors tests.

The three external collaborators (image API, object store, record store) are
replaced by the in-memory fakes from ``fakes.py``.
"""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest
from fakes import FakeImageGenerator, FakeObjectStore, FakeRecordStore
from fastapi.testclient import TestClient
from PIL import Image

from neighbors.api.main import create_app
from neighbors.core.config import NeighborsConfig
from neighbors.core.services import Services


@pytest.fixture
def image_generator() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def services(image_generator, object_store, record_store) -> Services:
    """Services bundle wired to the fakes."""
    return Services(images=image_generator, objects=object_store, records=record_store)


@pytest.fixture
def test_config(monkeypatch) -> NeighborsConfig:
    """Create a complete configuration independent of the host environment.

    Returns:
        NeighborsConfig instance for testing
    """
    for name in (
        "PORT",
        "HOST",
        "STORAGE_BUCKET",
        "MEMBERS_TABLE",
        "IMAGE_SIZE",
        "IMAGE_BACKGROUND",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return NeighborsConfig(
        _env_file=None,
        cors_origin="https://neighbors.example.com",
        openai_api_key="sk-test",
        openai_image_model="gpt-image-1",
        supabase_url="https://project.supabase.co",
        supabase_service_role_key="service-role-test",
    )


@pytest.fixture
def test_client(test_config, services) -> Iterator[TestClient]:
    """TestClient running the full app lifespan against the fakes."""
    with TestClient(create_app(test_config, services)) as client:
        yield client


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
