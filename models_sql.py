import asyncio
import logging
from datetime import datetime, timezone
from typing import List

from databases import Database
from sqlalchemy import insert, select, update, delete

from db_sqlalchemy import pastes
from errors import NotFound, StoreError
from models import Paste, PasteFound, PasteLookup, PasteMissing

logger = logging.getLogger(__name__)

# Seconds a single statement may take before it is treated as a store failure
DEFAULT_TIMEOUT = 10


class PasteRepository:
    """Maps paste operations onto single SQL statements against the pastes table."""

    def __init__(self, database: Database):
        self.database = database

    async def _run(self, op: str, awaitable, timeout: float):
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.error("%s timed out after %ss", op, timeout)
            raise StoreError(f"{op} timed out") from exc
        except Exception as exc:
            logger.error("%s failed: %s", op, exc, exc_info=True)
            raise StoreError(f"{op} failed") from exc

    async def create(self, content: str, timeout: float = DEFAULT_TIMEOUT) -> Paste:
        query = (
            insert(pastes)
            .values(content=content, created_at=datetime.now(timezone.utc))
            .returning(pastes.c.id, pastes.c.content, pastes.c.created_at)
        )
        row = await self._run("create paste", self.database.fetch_one(query), timeout)
        if row is None:
            raise StoreError("create paste returned no row")
        return Paste.from_row(row)

    async def get_by_id(self, paste_id: int, timeout: float = DEFAULT_TIMEOUT) -> PasteLookup:
        query = select(pastes.c.id, pastes.c.content, pastes.c.created_at).where(pastes.c.id == paste_id)
        row = await self._run("get paste", self.database.fetch_one(query), timeout)
        if row is None:
            return PasteMissing(paste_id)
        return PasteFound(Paste.from_row(row))

    async def update(self, paste_id: int, content: str, timeout: float = DEFAULT_TIMEOUT) -> Paste:
        # only content is ever rewritten
        query = (
            update(pastes)
            .where(pastes.c.id == paste_id)
            .values(content=content)
            .returning(pastes.c.id, pastes.c.content, pastes.c.created_at)
        )
        row = await self._run("update paste", self.database.fetch_one(query), timeout)
        if row is None:
            raise NotFound(paste_id)
        return Paste.from_row(row)

    async def delete(self, paste_id: int, timeout: float = DEFAULT_TIMEOUT) -> None:
        query = delete(pastes).where(pastes.c.id == paste_id).returning(pastes.c.id)
        row = await self._run("delete paste", self.database.fetch_one(query), timeout)
        if row is None:
            raise NotFound(paste_id)

    async def get_all(self, timeout: float = DEFAULT_TIMEOUT) -> List[Paste]:
        query = select(pastes.c.id, pastes.c.content, pastes.c.created_at).order_by(
            pastes.c.created_at.desc(), pastes.c.id.desc()
        )
        rows = await self._run("list pastes", self.database.fetch_all(query), timeout)
        return [Paste.from_row(r) for r in rows]

    async def ping(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        await self._run("ping", self.database.fetch_val("SELECT 1"), timeout)
