"""Who may see whom.

A candidate appears on a viewer's map only if they opted in with
``show_location`` and neither side has blocked the other. City text is a
separate disclosure layered on top of map visibility. The viewer always
sees themselves, using the live values their device holds rather than the
stored record.
"""
import logging
from dataclasses import dataclass

from wya.core.errors import UserNotFound
from wya.models.user import User
from wya.stores.base import UserStore

logger = logging.getLogger(__name__)


@dataclass
class LiveSelf:
    latitude: float | None = None
    longitude: float | None = None
    avatar: str | None = None


def is_blocked_between(viewer: User, candidate: User) -> bool:
    viewer_id = viewer.external_identity_id
    candidate_id = candidate.external_identity_id
    return (
        candidate_id in (viewer.blocked or [])
        or viewer_id in (candidate.blocked or [])
        or viewer_id in (candidate.blocked_by or [])
        or candidate_id in (viewer.blocked_by or [])
    )


def is_visible(viewer: User, candidate: User) -> bool:
    if not candidate.show_location:
        return False
    return not is_blocked_between(viewer, candidate)


def show_city_text(viewer: User, candidate: User) -> bool:
    return is_visible(viewer, candidate) and bool(candidate.show_city)


def _marker(user: User, city_visible: bool, is_self: bool = False) -> dict:
    return {
        "id": user.external_identity_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "avatar": user.avatar,
        "latitude": user.latitude,
        "longitude": user.longitude,
        "last_updated": user.last_updated,
        "city_visible": city_visible,
        "is_self": is_self,
    }


def visible_users(viewer: User, users: list[User], live: LiveSelf | None = None) -> list[dict]:
    """Map markers for ``viewer``: self first, then every visible candidate."""
    me = _marker(viewer, city_visible=True, is_self=True)
    if live is not None:
        if live.latitude is not None and live.longitude is not None:
            me["latitude"] = live.latitude
            me["longitude"] = live.longitude
        if live.avatar is not None:
            me["avatar"] = live.avatar
    entries = [me]

    for candidate in users:
        if candidate.external_identity_id == viewer.external_identity_id:
            continue
        if not is_visible(viewer, candidate):
            continue
        if candidate.latitude is None or candidate.longitude is None:
            continue
        entries.append(_marker(candidate, city_visible=show_city_text(viewer, candidate)))
    return entries


def contact_entries(viewer: User, users: list[User]) -> list[dict]:
    entries = []
    for candidate in users:
        if candidate.external_identity_id == viewer.external_identity_id:
            continue
        if is_blocked_between(viewer, candidate):
            continue
        # Coordinates and timestamp are only handed out for city lookup.
        city_visible = show_city_text(viewer, candidate)
        entries.append({
            "id": candidate.external_identity_id,
            "first_name": candidate.first_name,
            "last_name": candidate.last_name,
            "avatar": candidate.avatar,
            "email": candidate.email.lower() if candidate.email else None,
            "phone_number": candidate.phone_number,
            "city_visible": city_visible,
            "latitude": candidate.latitude if city_visible else None,
            "longitude": candidate.longitude if city_visible else None,
            "last_updated": candidate.last_updated if city_visible else None,
        })
    return entries


class VisibilityService:
    def __init__(self, store: UserStore):
        self.store = store

    async def _viewer(self, viewer_id: str) -> User:
        viewer = await self.store.get_user(viewer_id)
        if viewer is None:
            raise UserNotFound(viewer_id)
        return viewer

    async def map_for(self, viewer_id: str, live: LiveSelf | None = None) -> list[dict]:
        viewer = await self._viewer(viewer_id)
        return visible_users(viewer, await self.store.list_users(), live)

    async def contacts_for(self, viewer_id: str) -> list[dict]:
        viewer = await self._viewer(viewer_id)
        return contact_entries(viewer, await self.store.list_users())

    async def block(self, blocker_id: str, blocked_id: str) -> None:
        """Hide the two users from each other. There is no unblock."""
        if blocker_id == blocked_id:
            raise ValueError("Users cannot block themselves")
        await self.store.block_user(blocker_id, blocked_id)
        logger.info(f"User {blocker_id} blocked {blocked_id}")
