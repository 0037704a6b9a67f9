import logging
from datetime import datetime, timezone
from typing import Callable

from wya.stores.base import UserStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocationService:
    def __init__(self, store: UserStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def update_location(self, identity_id: str, latitude: float, longitude: float) -> bool:
        """Overwrite the user's last known position. Returns False if the user does not exist.

        No ordering check: a delayed retry can replace a newer fix.
        """
        updated = await self.store.update_user(
            identity_id,
            latitude=latitude,
            longitude=longitude,
            last_updated=self.clock(),
        )
        if not updated:
            logger.warning(f"Location update for unknown user {identity_id}")
        return updated
