"""Shared pytest fixtures for the Toolshed test suite."""

from __future__ import annotations

from typing import Generator, List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from toolshed.config import get_settings
from toolshed.db.repository import reset_repository_state
from toolshed.models.inventory import InventoryItem
from toolshed.server.app import create_app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_toolshed.db"
    monkeypatch.setenv("TOOLSHED_DATABASE_PATH", str(db_path))
    monkeypatch.delenv("TOOLSHED_API_TOKEN", raising=False)
    monkeypatch.delenv("TOOLSHED_LLM_API_KEY", raising=False)
    monkeypatch.setenv("TOOLSHED_WEB_SEARCH_ENABLED", "false")
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("TOOLSHED_DATABASE_PATH", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def workshop_inventory() -> List[InventoryItem]:
    """A small garage inventory used by matcher and assistant tests."""

    return [
        InventoryItem(
            id="item-drill",
            name="DeWalt 20V Cordless Drill",
            description="Compact drill driver with two batteries",
            category="Power Tools",
            tags=["drill", "cordless"],
            location="Garage > Red Toolbox",
        ),
        InventoryItem(
            id="item-hammer",
            name="Claw Hammer",
            description="16 oz steel hammer",
            category="Hand Tools",
            tags=["hammer"],
            location="Garage > Pegboard",
        ),
        InventoryItem(
            id="item-level",
            name="Torpedo Level",
            description="9 inch magnetic level",
            category="Measuring",
            tags=["level"],
            location="Unorganized",
        ),
    ]
