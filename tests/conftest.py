# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "database.json"


@pytest.fixture()
def settings(db_path: Path) -> Settings:
    """Settings pointing at a per-test database file."""
    return Settings(DATABASE_PATH=db_path)


@pytest.fixture()
def client(settings: Settings):
    # Entering the client runs the app lifespan, which opens the database.
    with TestClient(create_app(settings)) as c:
        yield c
