# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_manager.core.config import Settings
from task_manager.db.session import Database
from task_manager.main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture()
def db_settings() -> Settings:
    # bcrypt's minimum cost keeps registration fast
    return Settings(
        STORAGE_MODE="database",
        DATABASE_URL="sqlite://",
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        ENVIRONMENT="development",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def memory_settings() -> Settings:
    return Settings(STORAGE_MODE="memory", LOG_LEVEL="WARNING")


@pytest.fixture()
def database(db_settings: Settings) -> Iterator[Database]:
    """Fresh in-memory SQLite per test (not the process-cached one)."""
    db = Database(db_settings.DATABASE_URL)
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture()
def app(db_settings: Settings, database: Database) -> FastAPI:
    return create_app(db_settings, database=database)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def memory_client(memory_settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(memory_settings)) as c:
        yield c


@pytest.fixture()
def register(client: TestClient) -> Callable[..., str]:
    """Register a user and return their token."""

    def _register(name: str = "Ann", email: str = "a@x.com", password: str = "secret1") -> str:
        res = client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": password},
        )
        assert res.status_code == 201, res.json()
        return res.json()["data"]["token"]

    return _register


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
