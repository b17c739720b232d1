"""Persistence gateway against a real SQLite store."""

from datetime import datetime, timedelta, timezone

import pytest

from errors import NotFound, StoreError
from models import PasteFound, PasteMissing


async def test_create_assigns_id_and_timestamp(repository):
    before = datetime.now(timezone.utc)
    paste = await repository.create("hello")

    assert paste.id >= 1
    assert paste.content == "hello"
    assert paste.created_at.tzinfo is not None
    # stored timestamps keep microseconds, allow for clock granularity only
    assert paste.created_at >= before - timedelta(milliseconds=1)


async def test_create_then_get_returns_same_content(repository):
    created = await repository.create("some text\nwith lines")

    result = await repository.get_by_id(created.id)

    assert isinstance(result, PasteFound)
    assert result.paste.content == "some text\nwith lines"
    assert result.paste.id == created.id
    assert result.paste.created_at == created.created_at


async def test_get_missing_returns_sentinel(repository):
    result = await repository.get_by_id(999)

    assert result == PasteMissing(999)


async def test_update_changes_only_content(repository):
    created = await repository.create("before")

    updated = await repository.update(created.id, "after")

    assert updated.id == created.id
    assert updated.content == "after"
    assert updated.created_at == created.created_at
    result = await repository.get_by_id(created.id)
    assert result.paste.content == "after"
    assert result.paste.created_at == created.created_at


async def test_update_missing_raises_not_found(repository):
    with pytest.raises(NotFound) as exc_info:
        await repository.update(42, "nothing here")
    assert exc_info.value.paste_id == 42


async def test_delete_then_get_is_missing(repository):
    created = await repository.create("short lived")

    await repository.delete(created.id)

    assert isinstance(await repository.get_by_id(created.id), PasteMissing)


async def test_delete_missing_raises_not_found(repository):
    with pytest.raises(NotFound):
        await repository.delete(7)


async def test_get_all_empty(repository):
    assert await repository.get_all() == []


async def test_get_all_newest_first(repository):
    ids = [(await repository.create(f"paste {i}")).id for i in range(5)]

    rows = await repository.get_all()

    assert [p.id for p in rows] == list(reversed(ids))
    stamps = [p.created_at for p in rows]
    assert all(a >= b for a, b in zip(stamps, stamps[1:]))


async def test_ping(repository):
    await repository.ping()


async def test_driver_failure_is_store_error(broken_repository):
    with pytest.raises(StoreError):
        await broken_repository.get_by_id(1)
    with pytest.raises(StoreError):
        await broken_repository.create("x")
    with pytest.raises(StoreError):
        await broken_repository.get_all()


async def test_update_and_delete_surface_store_failures(broken_repository):
    # a failing store must never look like a missing row
    with pytest.raises(StoreError):
        await broken_repository.update(1, "x")
    with pytest.raises(StoreError):
        await broken_repository.delete(1)


async def test_timeout_is_store_error(slow_repository):
    with pytest.raises(StoreError, match="timed out"):
        await slow_repository.get_by_id(1, timeout=0.01)
