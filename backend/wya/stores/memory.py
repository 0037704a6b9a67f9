import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any

from wya.core.errors import UserAlreadyExists, UserNotFound
from wya.models.notification import Notification
from wya.models.report import Report, ReportStatus
from wya.models.user import User
from wya.stores.base import UserStore


class MemoryStore(UserStore):
    """Process-local store for development and tests.

    A single lock serialises every write, which gives the block operation
    and the notification check-and-insert the same atomicity the SQL
    backend gets from transactions and the unique constraint.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._notifications: list[Notification] = []
        self._reports: list[Report] = []
        self._lock = asyncio.Lock()

    @property
    def reports(self) -> list[Report]:
        """Snapshot of filed reports, for inspection in development."""
        return list(self._reports)

    async def list_users(self) -> list[User]:
        return list(self._users.values())

    async def get_user(self, identity_id: str) -> User | None:
        return self._users.get(identity_id)

    async def find_by_phone(self, phone_number: str) -> User | None:
        for user in self._users.values():
            if user.phone_number == phone_number:
                return user
        return None

    async def create_user(self, identity_id, phone_number, first_name, last_name, email) -> User:
        async with self._lock:
            if identity_id in self._users:
                raise UserAlreadyExists(identity_id)
            user = User(
                id=uuid.uuid4(),
                external_identity_id=identity_id,
                phone_number=phone_number,
                first_name=first_name,
                last_name=last_name,
                email=email,
                latitude=None,
                longitude=None,
                last_updated=None,
                show_location=False,
                show_city=False,
                avatar=None,
                blocked=[],
                blocked_by=[],
                expo_push_token=None,
                created_at=datetime.now(timezone.utc),
            )
            self._users[identity_id] = user
            return user

    async def update_user(self, identity_id: str, **fields: Any) -> bool:
        for name in fields:
            if not hasattr(User, name):
                raise TypeError(f"Unknown user field: {name}")
        async with self._lock:
            user = self._users.get(identity_id)
            if user is None:
                return False
            for name, value in fields.items():
                setattr(user, name, value)
            return True

    async def block_user(self, blocker_id: str, blocked_id: str) -> None:
        async with self._lock:
            blocker = self._users.get(blocker_id)
            if blocker is None:
                raise UserNotFound(blocker_id)
            blocked = self._users.get(blocked_id)
            if blocked is None:
                raise UserNotFound(blocked_id)
            blocker.blocked = sorted(set(blocker.blocked) | {blocked_id})
            blocked.blocked_by = sorted(set(blocked.blocked_by) | {blocker_id})

    async def delete_user(self, identity_id: str) -> bool:
        async with self._lock:
            return self._users.pop(identity_id, None) is not None

    async def list_inactive_users(self, before: datetime) -> list[User]:
        return [
            u for u in self._users.values()
            if u.last_updated is not None and u.last_updated < before
        ]

    async def notification_exists(self, user_id: str, nonce: str) -> bool:
        return any(n.user_id == user_id and n.nonce == nonce for n in self._notifications)

    async def record_notification(self, user_id, title, content, nonce, status="sent") -> bool:
        async with self._lock:
            if await self.notification_exists(user_id, nonce):
                return False
            self._notifications.append(Notification(
                id=uuid.uuid4(),
                user_id=user_id,
                title=title,
                content=content,
                status=status,
                nonce=nonce,
                created_at=datetime.now(timezone.utc),
            ))
            return True

    async def list_notifications(self, user_id: str) -> list[Notification]:
        return [n for n in self._notifications if n.user_id == user_id]

    async def create_report(self, reporter_id: str, reported_id: str, explanation: str) -> Report:
        report = Report(
            id=uuid.uuid4(),
            reporter_id=reporter_id,
            reported_id=reported_id,
            explanation=explanation,
            status=ReportStatus.pending,
            timestamp=datetime.now(timezone.utc),
        )
        async with self._lock:
            self._reports.append(report)
        return report
