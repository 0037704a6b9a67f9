import pytest

from wya.core.errors import UserNotFound
from wya.services.visibility_service import (
    LiveSelf, VisibilityService, contact_entries, is_visible, show_city_text, visible_users,
)


@pytest.mark.asyncio
async def test_hidden_user_is_excluded_from_map(make_user, store):
    """A shows their location, B doesn't: V sees A only."""
    viewer = await make_user("viewer", show_location=True, latitude=1.0, longitude=1.0)
    await make_user("alice", show_location=True, latitude=10.0, longitude=20.0)
    await make_user("bob", show_location=False, latitude=30.0, longitude=40.0)

    markers = visible_users(viewer, await store.list_users())
    ids = [m["id"] for m in markers]
    assert "alice" in ids
    assert "bob" not in ids


@pytest.mark.asyncio
async def test_show_location_false_is_never_visible(make_user):
    viewer = await make_user("viewer")
    hidden = await make_user("hidden", show_location=False, show_city=True)
    assert not is_visible(viewer, hidden)
    assert not show_city_text(viewer, hidden)


@pytest.mark.asyncio
async def test_block_hides_in_both_directions(make_user, store):
    await make_user("alice", show_location=True, latitude=1.0, longitude=1.0)
    await make_user("bob", show_location=True, latitude=2.0, longitude=2.0)

    await VisibilityService(store).block("alice", "bob")

    alice = await store.get_user("alice")
    bob = await store.get_user("bob")
    assert not is_visible(bob, alice)  # blocked party can't see the blocker
    assert not is_visible(alice, bob)  # blocker no longer sees the blocked party


@pytest.mark.asyncio
async def test_block_recorded_on_both_sides(make_user, store):
    await make_user("alice")
    await make_user("bob")

    await VisibilityService(store).block("alice", "bob")

    assert "bob" in (await store.get_user("alice")).blocked
    assert "alice" in (await store.get_user("bob")).blocked_by


@pytest.mark.asyncio
async def test_block_unknown_user_changes_nothing(make_user, store):
    await make_user("alice")

    with pytest.raises(UserNotFound):
        await VisibilityService(store).block("alice", "ghost")

    assert (await store.get_user("alice")).blocked == []


@pytest.mark.asyncio
async def test_block_self_rejected(make_user, store):
    await make_user("alice")
    with pytest.raises(ValueError):
        await VisibilityService(store).block("alice", "alice")


@pytest.mark.asyncio
async def test_blocking_twice_is_idempotent(make_user, store):
    await make_user("alice")
    await make_user("bob")
    service = VisibilityService(store)
    await service.block("alice", "bob")
    await service.block("alice", "bob")
    assert (await store.get_user("alice")).blocked == ["bob"]
    assert (await store.get_user("bob")).blocked_by == ["alice"]


@pytest.mark.asyncio
async def test_city_hidden_user_still_on_map(make_user, store):
    viewer = await make_user("viewer")
    await make_user("carol", show_location=True, show_city=False, latitude=5.0, longitude=6.0)

    markers = {m["id"]: m for m in visible_users(viewer, await store.list_users())}
    assert markers["carol"]["city_visible"] is False


@pytest.mark.asyncio
async def test_viewer_sees_self_with_live_values(make_user, store):
    viewer = await make_user(
        "viewer", show_location=False, latitude=1.0, longitude=1.0, avatar="bluey"
    )
    live = LiveSelf(latitude=48.85, longitude=2.35, avatar="mrfox")

    markers = visible_users(viewer, await store.list_users(), live)
    me = markers[0]
    assert me["is_self"] is True
    assert (me["latitude"], me["longitude"], me["avatar"]) == (48.85, 2.35, "mrfox")


@pytest.mark.asyncio
async def test_users_without_position_are_skipped(make_user, store):
    viewer = await make_user("viewer")
    await make_user("newbie", show_location=True)
    ids = [m["id"] for m in visible_users(viewer, await store.list_users())]
    assert ids == ["viewer"]


@pytest.mark.asyncio
async def test_contacts_exclude_blocked_and_gate_city(make_user, store):
    await make_user("viewer")
    await make_user("open", show_location=True, show_city=True, latitude=1.0, longitude=2.0, email="OPEN@Example.com")
    await make_user("private", show_location=False, show_city=True, latitude=3.0, longitude=4.0)
    await make_user("blocker", show_location=True, show_city=True, latitude=5.0, longitude=6.0)
    await VisibilityService(store).block("blocker", "viewer")

    viewer = await store.get_user("viewer")
    contacts = {c["id"]: c for c in contact_entries(viewer, await store.list_users())}

    assert set(contacts) == {"open", "private"}
    assert contacts["open"]["city_visible"] is True
    assert contacts["open"]["email"] == "open@example.com"
    assert contacts["private"]["city_visible"] is False
    assert contacts["private"]["latitude"] is None


@pytest.mark.asyncio
async def test_map_for_unknown_viewer(store):
    with pytest.raises(UserNotFound):
        await VisibilityService(store).map_for("ghost")
