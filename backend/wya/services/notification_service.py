import calendar
import logging
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Callable

from wya.core.errors import UpstreamFailure
from wya.services.location_service import utcnow
from wya.services.push_service import ExpoPushClient, PushMessage, is_push_token
from wya.stores.base import UserStore

logger = logging.getLogger(__name__)

CHECK_IN_TITLE = "Hi from rabbitholers!"
CHECK_IN_CONTENT = "We noticed you haven't checked in for a while - take a moment to open the app."
CHECK_IN_PUSH_TITLE = "Time to Check In!"
CHECK_IN_PUSH_BODY = "We noticed you haven't checked in for a while - take a moment to open the app!"


def check_in_nonce(now: datetime) -> str:
    """Identifies this calendar month's check-in reminder, e.g. ``check-in-october-2026``."""
    return f"check-in-{calendar.month_name[now.month].lower()}-{now.year}"


@dataclass
class ScanSummary:
    nonce: str
    scanned: int = 0
    notified: int = 0
    skipped: int = 0
    pushed: int = 0
    push_failures: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class NotificationService:
    def __init__(
        self,
        store: UserStore,
        push: ExpoPushClient,
        inactivity_days: int = 30,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.push = push
        self.inactivity_window = timedelta(days=inactivity_days)
        self.clock = clock

    async def create_notification(
        self, user_id: str, title: str, content: str, nonce: str | None = None
    ) -> bool:
        """Record a notification. Returns False if this nonce was already used for the user."""
        return await self.store.record_notification(
            user_id, title, content, nonce or str(uuid.uuid4())
        )

    async def has_been_sent(self, user_id: str, nonce: str) -> bool:
        return await self.store.notification_exists(user_id, nonce)

    async def send_push(self, token: str | None, title: str, body: str) -> bool:
        """Best-effort delivery. Never raises; malformed tokens are logged and dropped."""
        if not is_push_token(token):
            logger.error(f"Invalid Expo push token: {token!r}")
            return False
        try:
            tickets = await self.push.send([PushMessage(to=token, title=title, body=body)])
        except UpstreamFailure as e:
            logger.error(f"Error sending push notification to {token}: {e}")
            return False
        return all(t.get("status") != "error" for t in tickets)

    async def check_inactive_users(self) -> ScanSummary:
        """Nudge every user who hasn't reported a location within the inactivity window.

        Each user gets at most one reminder per calendar month. The record is
        written before delivery and stays even if delivery fails.
        """
        now = self.clock()
        summary = ScanSummary(nonce=check_in_nonce(now))
        inactive = await self.store.list_inactive_users(now - self.inactivity_window)
        summary.scanned = len(inactive)

        for user in inactive:
            user_id = user.external_identity_id
            # Cheap pre-check; the insert below is what actually guarantees one per period.
            if await self.has_been_sent(user_id, summary.nonce):
                created = False
            else:
                created = await self.create_notification(
                    user_id, CHECK_IN_TITLE, CHECK_IN_CONTENT, summary.nonce
                )
            if not created:
                logger.info(f"Notification already sent this month: user={user_id} nonce={summary.nonce}")
                summary.skipped += 1
                continue
            summary.notified += 1

            if user.expo_push_token:
                if await self.send_push(user.expo_push_token, CHECK_IN_PUSH_TITLE, CHECK_IN_PUSH_BODY):
                    summary.pushed += 1
                else:
                    summary.push_failures += 1

            logger.info(f"Sent inactivity notification: user={user_id} nonce={summary.nonce}")

        return summary
