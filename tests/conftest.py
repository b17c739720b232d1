"""Shared fixtures: every test gets its own SQLite store."""

import pytest
from fastapi.testclient import TestClient

from db_sqlalchemy import Store
from main import create_app
from models_sql import PasteRepository


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'pastes.db'}"


@pytest.fixture
async def repository(db_url):
    store = Store(db_url)
    await store.connect()
    yield PasteRepository(store.database)
    await store.disconnect()


@pytest.fixture
def client(db_url):
    with TestClient(create_app(Store(db_url))) as c:
        yield c


class BrokenDatabase:
    """Stands in for a store whose every statement fails."""

    def __init__(self, exc=None):
        self.exc = exc or ConnectionError("connection refused")

    async def fetch_one(self, query):
        raise self.exc

    async def fetch_all(self, query):
        raise self.exc

    async def fetch_val(self, query):
        raise self.exc


class SlowDatabase:
    """Stands in for a store that never answers in time."""

    def __init__(self, delay=1.0):
        self.delay = delay

    async def _sleep(self, query):
        import asyncio
        await asyncio.sleep(self.delay)

    fetch_one = fetch_all = fetch_val = _sleep


@pytest.fixture
def broken_client(client):
    client.app.state.repository = PasteRepository(BrokenDatabase())
    return client


@pytest.fixture
def broken_repository():
    return PasteRepository(BrokenDatabase())


@pytest.fixture
def slow_repository():
    return PasteRepository(SlowDatabase())
