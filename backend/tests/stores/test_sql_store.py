from unittest.mock import AsyncMock, MagicMock

import pytest

from wya.core.errors import UserNotFound
from wya.models.user import User
from wya.stores.sql import SqlStore


def make_db(*results):
    db = AsyncMock()
    db.add = MagicMock()
    db.execute.side_effect = list(results)
    return db


def rows(users):
    result = MagicMock()
    result.scalars.return_value.all.return_value = users
    return result


@pytest.mark.asyncio
async def test_update_reports_missing_user():
    result = MagicMock()
    result.rowcount = 0
    db = make_db(result)

    assert await SqlStore(db).update_user("ghost", show_city=True) is False
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_block_updates_both_rows_in_one_commit():
    alice = User(external_identity_id="alice", blocked=[], blocked_by=[])
    bob = User(external_identity_id="bob", blocked=[], blocked_by=["carol"])
    db = make_db(rows([alice, bob]))

    await SqlStore(db).block_user("alice", "bob")

    assert alice.blocked == ["bob"]
    assert bob.blocked_by == ["alice", "carol"]
    db.commit.assert_awaited_once()
    db.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_block_with_missing_side_rolls_back():
    alice = User(external_identity_id="alice", blocked=[], blocked_by=[])
    db = make_db(rows([alice]))

    with pytest.raises(UserNotFound):
        await SqlStore(db).block_user("alice", "bob")

    assert alice.blocked == []
    db.rollback.assert_awaited_once()
    db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_record_notification_conflict_returns_false():
    result = MagicMock()
    result.first.return_value = None
    db = make_db(result)

    assert await SqlStore(db).record_notification("alice", "t", "c", "check-in-october-2026") is False


@pytest.mark.asyncio
async def test_record_notification_insert_returns_true():
    result = MagicMock()
    result.first.return_value = ("some-id",)
    db = make_db(result)

    assert await SqlStore(db).record_notification("alice", "t", "c", "check-in-october-2026") is True
