"""Security-related integration tests."""

from __future__ import annotations

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from toolshed.config import get_settings
from toolshed.db.repository import reset_repository_state
from toolshed.server.app import create_app


@pytest.fixture()
def secure_client(tmp_path, monkeypatch) -> TestClient:
    db_path = tmp_path / "secure.db"
    monkeypatch.setenv("TOOLSHED_DATABASE_PATH", str(db_path))
    monkeypatch.setenv("TOOLSHED_API_TOKEN", "secret-token")
    get_settings.cache_clear()
    reset_repository_state()
    app = create_app()
    client = TestClient(app)
    yield client
    monkeypatch.delenv("TOOLSHED_API_TOKEN", raising=False)
    reset_repository_state()
    get_settings.cache_clear()


def test_item_writes_require_api_token(secure_client):
    response = secure_client.post("/items", json={"name": "Drill"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = secure_client.post("/items", json={"name": "Drill"}, headers={"Authorization": "Bearer wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = secure_client.post(
        "/items",
        json={"name": "Drill"},
        headers={"Authorization": "Bearer secret-token"},
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_alternative_token_locations(secure_client):
    response = secure_client.post("/locations", json={"name": "Shed"}, headers={"X-API-Key": "secret-token"})
    assert response.status_code == status.HTTP_201_CREATED

    response = secure_client.post("/shopping-list", json={"tool_name": "Saw"}, params={"api_token": "secret-token"})
    assert response.status_code == status.HTTP_201_CREATED


def test_reads_stay_open(secure_client):
    assert secure_client.get("/items").status_code == status.HTTP_200_OK
    assert secure_client.get("/reminders/counts").status_code == status.HTTP_200_OK


def test_ai_endpoints_enforce_api_token(secure_client):
    response = secure_client.post("/assistant/work", json={"task": "hang a picture"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = secure_client.post("/analyze/image", json={"image": "QUJD"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
