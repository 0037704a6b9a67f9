from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update, delete
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wya.core.errors import UserAlreadyExists, UserNotFound
from wya.models.notification import Notification
from wya.models.report import Report, ReportStatus
from wya.models.user import User
from wya.stores.base import UserStore


class SqlStore(UserStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def get_user(self, identity_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.external_identity_id == identity_id))
        return result.scalar_one_or_none()

    async def find_by_phone(self, phone_number: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.phone_number == phone_number).order_by(User.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def create_user(self, identity_id, phone_number, first_name, last_name, email) -> User:
        user = User(
            external_identity_id=identity_id,
            phone_number=phone_number,
            first_name=first_name,
            last_name=last_name,
            email=email,
            blocked=[],
            blocked_by=[],
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UserAlreadyExists(identity_id)
        await self.db.refresh(user)
        return user

    async def update_user(self, identity_id: str, **fields: Any) -> bool:
        # Single UPDATE statement: whichever write commits last wins.
        result = await self.db.execute(
            update(User).where(User.external_identity_id == identity_id).values(**fields)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def block_user(self, blocker_id: str, blocked_id: str) -> None:
        # Lock both rows in a stable order so concurrent blocks can't deadlock.
        result = await self.db.execute(
            select(User)
            .where(User.external_identity_id.in_([blocker_id, blocked_id]))
            .order_by(User.external_identity_id)
            .with_for_update()
        )
        users = {u.external_identity_id: u for u in result.scalars().all()}
        for identity_id in (blocker_id, blocked_id):
            if identity_id not in users:
                await self.db.rollback()
                raise UserNotFound(identity_id)

        blocker, blocked = users[blocker_id], users[blocked_id]
        # ARRAY columns need reassignment for the ORM to see the change.
        blocker.blocked = sorted(set(blocker.blocked or []) | {blocked_id})
        blocked.blocked_by = sorted(set(blocked.blocked_by or []) | {blocker_id})
        await self.db.commit()

    async def delete_user(self, identity_id: str) -> bool:
        result = await self.db.execute(delete(User).where(User.external_identity_id == identity_id))
        await self.db.commit()
        return result.rowcount > 0

    async def list_inactive_users(self, before: datetime) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.last_updated.is_not(None), User.last_updated < before)
        )
        return list(result.scalars().all())

    async def notification_exists(self, user_id: str, nonce: str) -> bool:
        result = await self.db.execute(
            select(Notification.id).where(Notification.user_id == user_id, Notification.nonce == nonce)
        )
        return result.first() is not None

    async def record_notification(self, user_id, title, content, nonce, status="sent") -> bool:
        stmt = (
            insert(Notification)
            .values(
                user_id=user_id,
                title=title,
                content=content,
                status=status,
                nonce=nonce,
                created_at=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(constraint="uq_notifications_user_nonce")
            .returning(Notification.id)
        )
        result = await self.db.execute(stmt)
        inserted = result.first() is not None
        await self.db.commit()
        return inserted

    async def list_notifications(self, user_id: str) -> list[Notification]:
        result = await self.db.execute(
            select(Notification).where(Notification.user_id == user_id).order_by(Notification.created_at)
        )
        return list(result.scalars().all())

    async def create_report(self, reporter_id: str, reported_id: str, explanation: str) -> Report:
        report = Report(
            reporter_id=reporter_id,
            reported_id=reported_id,
            explanation=explanation,
            status=ReportStatus.pending,
        )
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)
        return report
