"""Storage interface shared by the SQL and in-memory backends.

Services receive a store instance explicitly; nothing reaches for a global
session. Every method is a coroutine so both backends are interchangeable.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from wya.models.notification import Notification
from wya.models.report import Report
from wya.models.user import User


class UserStore(ABC):
    @abstractmethod
    async def list_users(self) -> list[User]: ...

    @abstractmethod
    async def get_user(self, identity_id: str) -> User | None: ...

    @abstractmethod
    async def find_by_phone(self, phone_number: str) -> User | None: ...

    @abstractmethod
    async def create_user(
        self,
        identity_id: str,
        phone_number: str | None,
        first_name: str,
        last_name: str,
        email: str | None,
    ) -> User:
        """Insert a user. Raises UserAlreadyExists if the identity id is taken."""

    @abstractmethod
    async def update_user(self, identity_id: str, **fields: Any) -> bool:
        """Overwrite the given fields. Returns False when no record matches."""

    @abstractmethod
    async def block_user(self, blocker_id: str, blocked_id: str) -> None:
        """Record both sides of a block in one atomic unit.

        Raises UserNotFound, leaving both records untouched, if either user
        is missing.
        """

    @abstractmethod
    async def delete_user(self, identity_id: str) -> bool: ...

    @abstractmethod
    async def list_inactive_users(self, before: datetime) -> list[User]:
        """Users with a recorded position older than `before`."""

    @abstractmethod
    async def notification_exists(self, user_id: str, nonce: str) -> bool: ...

    @abstractmethod
    async def record_notification(
        self, user_id: str, title: str, content: str, nonce: str, status: str = "sent"
    ) -> bool:
        """Insert a notification. Returns False if (user_id, nonce) is already recorded."""

    @abstractmethod
    async def list_notifications(self, user_id: str) -> list[Notification]:
        """Notification history for a user, oldest first. Used for inspection and support."""

    @abstractmethod
    async def create_report(self, reporter_id: str, reported_id: str, explanation: str) -> Report: ...
