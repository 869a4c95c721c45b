"""Pytest configuration and fixtures."""

import os

import httpx
import pytest
import pytest_asyncio

from gallery.api.client import GalleryApiClient
from gallery.config import GalleryConfig
from tests.fakes import API_BASE, FakeBackend, FakeClock

# Configure pytest-asyncio to auto-detect async tests
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> FakeBackend:
    return FakeBackend(clock)


@pytest.fixture
def config(monkeypatch) -> GalleryConfig:
    """Config pointing at the fake backend, isolated from GALLERY_* env vars."""
    for key in list(os.environ):
        if key.startswith("GALLERY_"):
            monkeypatch.delenv(key)
    return GalleryConfig(api_base_url=API_BASE)


@pytest_asyncio.fixture
async def api(backend: FakeBackend, config: GalleryConfig):
    """GalleryApiClient wired to the fake backend for both HTTP clients."""
    transport = httpx.MockTransport(backend.handle)
    http_client = httpx.AsyncClient(base_url=API_BASE, transport=transport)
    storage_client = httpx.AsyncClient(transport=transport)
    client = GalleryApiClient(
        config, http_client=http_client, storage_client=storage_client
    )
    yield client
    await http_client.aclose()
    await storage_client.aclose()
