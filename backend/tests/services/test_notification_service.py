from datetime import datetime, timezone

import httpx
import pytest

from conftest import NOW, VALID_TOKEN, days_ago
from wya.services.notification_service import NotificationService, check_in_nonce
from wya.services.push_service import ExpoPushClient, PushDeliveryError


def make_service(store, push):
    return NotificationService(store, push, inactivity_days=30, clock=lambda: NOW)


def test_nonce_is_per_calendar_month():
    assert check_in_nonce(NOW) == "check-in-october-2026"
    assert check_in_nonce(datetime(2027, 1, 3, tzinfo=timezone.utc)) == "check-in-january-2027"


@pytest.mark.asyncio
async def test_stale_user_gets_one_record_and_one_push(make_user, store, push):
    await make_user("alice", last_updated=days_ago(40), expo_push_token=VALID_TOKEN)

    summary = await make_service(store, push).check_inactive_users()

    records = await store.list_notifications("alice")
    assert len(records) == 1
    assert records[0].nonce == "check-in-october-2026"
    push.send.assert_awaited_once()
    message = push.send.await_args.args[0][0]
    assert message.to == VALID_TOKEN
    assert summary.notified == 1
    assert summary.pushed == 1


@pytest.mark.asyncio
async def test_stale_user_without_token_still_gets_record(make_user, store, push):
    await make_user("alice", last_updated=days_ago(40))

    summary = await make_service(store, push).check_inactive_users()

    assert len(await store.list_notifications("alice")) == 1
    push.send.assert_not_awaited()
    assert summary.pushed == 0


@pytest.mark.asyncio
async def test_second_scan_in_same_month_does_not_duplicate(make_user, store, push):
    await make_user("alice", last_updated=days_ago(40), expo_push_token=VALID_TOKEN)
    service = make_service(store, push)

    await service.check_inactive_users()
    summary = await service.check_inactive_users()

    assert len(await store.list_notifications("alice")) == 1
    assert push.send.await_count == 1
    assert summary.skipped == 1
    assert summary.notified == 0


@pytest.mark.asyncio
async def test_active_and_never_located_users_are_ignored(make_user, store, push):
    await make_user("recent", last_updated=days_ago(3))
    await make_user("never")

    summary = await make_service(store, push).check_inactive_users()

    assert summary.scanned == 0
    assert await store.list_notifications("recent") == []
    assert await store.list_notifications("never") == []


@pytest.mark.asyncio
async def test_failed_delivery_keeps_record(make_user, store, push):
    await make_user("alice", last_updated=days_ago(40), expo_push_token=VALID_TOKEN)
    push.send.side_effect = PushDeliveryError("expo down")
    service = make_service(store, push)

    summary = await service.check_inactive_users()
    assert summary.push_failures == 1
    assert len(await store.list_notifications("alice")) == 1

    # the period counts as handled; no retry spam
    push.send.side_effect = None
    await service.check_inactive_users()
    assert push.send.await_count == 1


@pytest.mark.asyncio
async def test_malformed_token_is_not_sent(make_user, store, push):
    await make_user("alice", last_updated=days_ago(40), expo_push_token="not-a-token")

    summary = await make_service(store, push).check_inactive_users()

    push.send.assert_not_awaited()
    assert summary.push_failures == 1
    assert len(await store.list_notifications("alice")) == 1


@pytest.mark.asyncio
async def test_create_notification_generates_nonce(store, push):
    service = make_service(store, push)
    assert await service.create_notification("alice", "Hi", "there") is True
    assert await service.create_notification("alice", "Hi", "there") is True
    records = await store.list_notifications("alice")
    assert len({r.nonce for r in records}) == 2


@pytest.mark.asyncio
async def test_has_been_sent(store, push):
    service = make_service(store, push)
    assert not await service.has_been_sent("alice", "check-in-october-2026")
    await service.create_notification("alice", "Hi", "there", nonce="check-in-october-2026")
    assert await service.has_been_sent("alice", "check-in-october-2026")


@pytest.mark.asyncio
async def test_garbled_push_response_does_not_abort_scan(make_user, store):
    await make_user("alice", last_updated=days_ago(40), expo_push_token=VALID_TOKEN)
    await make_user("bob", last_updated=days_ago(45), expo_push_token=VALID_TOKEN)
    client = ExpoPushClient(
        "https://push.test/send",
        transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>gateway</html>")),
    )

    summary = await make_service(store, client).check_inactive_users()

    assert len(await store.list_notifications("alice")) == 1
    assert len(await store.list_notifications("bob")) == 1
    assert summary.notified == 2
    assert summary.push_failures == 2
    assert summary.pushed == 0


@pytest.mark.asyncio
async def test_already_recorded_nonce_is_skipped_before_insert(make_user, store, push):
    await make_user("alice", last_updated=days_ago(40), expo_push_token=VALID_TOKEN)
    await store.record_notification("alice", "earlier", "earlier", "check-in-october-2026")
    service = make_service(store, push)

    assert await service.has_been_sent("alice", "check-in-october-2026") is True
    summary = await service.check_inactive_users()

    assert summary.skipped == 1
    assert summary.notified == 0
    assert len(await store.list_notifications("alice")) == 1
    push.send.assert_not_awaited()
