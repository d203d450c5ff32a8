"""
Pytest fixtures for PolicyCheck tests. Settings are built explicitly (no .env) and the
Valkey cache is replaced by an in-memory dict.
"""

from __future__ import annotations

import pytest

from policycheck.core.config import Settings, get_settings

SIGNING_SEED = "11" * 32

FINAL_SALE_TEXT = "All sales are final. No returns or exchanges accepted."
GENEROUS_TEXT = (
    "Free returns within 60 days, full refund to original payment method, free shipping on all orders"
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        signing_key=SIGNING_SEED,
        generative_enabled=False,
        gemini_api_key=None,
    )


@pytest.fixture
def memory_cache(monkeypatch):
    """Swap the Valkey-backed cache helpers used by the check route for a dict."""
    import policycheck.api.check as check_module

    store: dict[str, object] = {}

    def fake_set_json(key, value, *, ttl_seconds=None):
        store[key] = value

    def fake_get_json(key, model):
        return store.get(key)

    monkeypatch.setattr(check_module, "set_json", fake_set_json)
    monkeypatch.setattr(check_module, "get_json", fake_get_json)
    return store


@pytest.fixture
def client(settings, memory_cache):
    """FastAPI TestClient with settings overridden and an in-memory cache."""
    from fastapi.testclient import TestClient

    from policycheck.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
