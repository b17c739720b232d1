import os
import asyncio
import logging
from urllib.parse import quote
from sqlalchemy import (MetaData, Table, Column, Integer, Text, DateTime, Index)
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine
from databases import Database

from errors import StoreError

logger = logging.getLogger(__name__)

# Seconds allowed for the startup connectivity check
CONNECT_TIMEOUT = 5

# asyncpg pool bounds, only applied to PostgreSQL URLs
POOL_OPTIONS = {
    "min_size": 5,
    "max_size": 25,
    "max_inactive_connection_lifetime": 30 * 60,
}

metadata = MetaData()

pastes = Table(
    "pastes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("content", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("pastes_created_at", "created_at"),
)


def database_url() -> str:
    """Build the store URL from the environment.

    DB_URL wins when set. Otherwise the PostgreSQL URL is assembled from
    DB_HOST, DB_PORT, DB_USER, DB_PASSWORD and DB_NAME.
    """
    url = (os.getenv("DB_URL") or "").strip()
    if url:
        return url

    host = os.getenv("DB_HOST")
    if not host:
        raise RuntimeError("DB_HOST (or DB_URL) is not set.")
    port = os.getenv("DB_PORT") or "5432"
    user = quote(os.getenv("DB_USER") or "", safe="")
    password = quote(os.getenv("DB_PASSWORD") or "", safe="")
    name = os.getenv("DB_NAME") or ""
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"


def pool_options(url: str) -> dict:
    if make_url(url).get_backend_name() == "postgresql":
        return dict(POOL_OPTIONS)
    return {}


async def init_db(url: str):
    """Create tables using SQLAlchemy async engine. Call this at application startup."""
    if make_url(url).get_backend_name() == "sqlite":
        # ensure folder exists before any DB IO
        path = make_url(url).database
        if path and path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    async_engine = create_async_engine(url, echo=False)
    try:
        async with async_engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    finally:
        await async_engine.dispose()
    logger.info("pastes schema ready")


class Store:
    """Owns the connection pool for the lifetime of the application."""

    def __init__(self, url: str = None):
        self.url = url or database_url()
        self.database = Database(self.url, **pool_options(self.url))

    @property
    def is_connected(self) -> bool:
        return self.database.is_connected

    async def _open(self):
        await init_db(self.url)
        await self.database.connect()
        await self.database.fetch_val("SELECT 1")

    async def connect(self):
        # schema bootstrap, pool creation and ping share one deadline
        try:
            await asyncio.wait_for(self._open(), timeout=CONNECT_TIMEOUT)
        except Exception as exc:
            await self.disconnect()
            if isinstance(exc, asyncio.TimeoutError):
                raise StoreError(f"database not reachable within {CONNECT_TIMEOUT}s") from exc
            raise StoreError(f"unable to connect to database: {exc}") from exc
        logger.info("database connection established successfully")

    async def disconnect(self):
        if self.database.is_connected:
            await self.database.disconnect()
            logger.info("database connection closed")
