import pytest
from unittest.mock import AsyncMock

from models.provider_models import Capability, ProviderDescriptor


@pytest.fixture(autouse=True)
def json_store(tmp_path, monkeypatch):
    """Fresh on-disk store per test, installed as the global instance."""
    from utils.storage import JSONStore
    store = JSONStore(str(tmp_path / "storage.db"))
    monkeypatch.setattr("utils.storage._json_store", store)
    return store


@pytest.fixture(autouse=True)
def reset_dispatcher(monkeypatch):
    """Never let a test reuse a dispatcher built from real configuration."""
    monkeypatch.setattr("services.dispatcher._dispatcher", None)


@pytest.fixture
def make_descriptor():
    """Factory for provider descriptors with sensible defaults."""
    def _make(name, priority=1, credential="test-credential", capabilities=(Capability.TEXT,), models=None):
        return ProviderDescriptor(
            name=name,
            display_name=name.capitalize(),
            base_url=f"https://{name}.example.com/v1",
            credential=credential,
            capabilities=frozenset(capabilities),
            priority=priority,
            models=models or {},
        )
    return _make


@pytest.fixture
def gemini_descriptor(make_descriptor):
    return make_descriptor(
        "gemini",
        priority=1,
        capabilities=(Capability.TEXT, Capability.CODE),
        models={"text": "gemini-pro"},
    )


@pytest.fixture
def openai_descriptor(make_descriptor):
    return make_descriptor(
        "openai",
        priority=2,
        capabilities=(Capability.TEXT, Capability.CODE, Capability.IMAGE),
        models={"chat": "gpt-3.5-turbo", "image": "dall-e-3"},
    )


@pytest.fixture
def stability_descriptor(make_descriptor):
    return make_descriptor(
        "stability",
        priority=1,
        capabilities=(Capability.IMAGE,),
        models={"sdxl": "stable-diffusion-xl-1024-v1-0"},
    )


@pytest.fixture
def mock_http_client(monkeypatch):
    """Shared provider client replaced by an AsyncMock."""
    from utils.http_client import HTTPClientManager
    client = AsyncMock()
    client.post = AsyncMock()
    monkeypatch.setattr(HTTPClientManager, "get_provider_client", lambda: client)
    return client


@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"X-API-Key": "test-key"}


@pytest.fixture
def fake_adapters():
    from tests.fixtures.mock_clients import FakeAdapter
    return {
        "gemini": FakeAdapter("gemini"),
        "openai": FakeAdapter("openai"),
        "stability": FakeAdapter("stability"),
    }


@pytest.fixture
def configured_app(monkeypatch, fake_adapters, gemini_descriptor, openai_descriptor, stability_descriptor):
    """App with a known API key and a dispatcher backed by fake adapters."""
    from fastapi.testclient import TestClient
    from auth import APIKeyMiddleware
    from main import create_app
    from services.dispatcher import Dispatcher
    from services.registry import ProviderRegistry

    monkeypatch.setattr(APIKeyMiddleware, "API_KEY", "test-key")

    registry = ProviderRegistry([gemini_descriptor, openai_descriptor, stability_descriptor])
    dispatcher = Dispatcher(registry, adapters=fake_adapters, enable_cache=False)
    monkeypatch.setattr("services.dispatcher._dispatcher", dispatcher)

    with TestClient(create_app()) as client:
        yield client
