"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.student_store import StoreError, get_store


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    """Point the application at a fresh SQLite file for each test."""
    url = "sqlite+aiosqlite:///{}".format(tmp_path / "test.db")
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture
def client(database_url):
    """TestClient running the app lifespan, so the store is opened and closed."""
    with TestClient(app) as test_client:
        yield test_client


class FailingStore:
    """Store double whose every operation fails like a broken database."""

    def __init__(self):
        self.calls = []

    async def find_by_name(self, name):
        self.calls.append(("find_by_name", name))
        raise StoreError("disk I/O error")

    async def insert_new(self, name):
        self.calls.append(("insert_new", name))
        raise StoreError("disk I/O error")

    async def update_scores(self, name, aptitude, coding, resume, interview):
        self.calls.append(("update_scores", name))
        raise StoreError("disk I/O error")


@pytest.fixture
def failing_store():
    """Client whose routes receive a FailingStore instead of the real one."""
    store = FailingStore()
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app), store
    finally:
        app.dependency_overrides.pop(get_store, None)
