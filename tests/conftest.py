from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from config import settings
from main import app


@pytest.fixture
def offline(monkeypatch):
    """No external credentials: every live call must fall back."""
    monkeypatch.setattr(settings, "use_mock_ai", False)
    monkeypatch.setattr(settings, "mock_latency_seconds", 0.0)
    monkeypatch.setattr(settings, "gemini_api_key", None)
    monkeypatch.setattr(settings, "nyckel_api_key", None)
    monkeypatch.setattr(settings, "nyckel_client_id", None)
    monkeypatch.setattr(settings, "nyckel_client_secret", None)
    return settings


@pytest.fixture
def mock_mode(offline, monkeypatch):
    monkeypatch.setattr(settings, "use_mock_ai", True)
    return settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
