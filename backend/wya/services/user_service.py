import logging

from wya.core.errors import OrphanedRecordError, UserNotFound
from wya.models.user import Avatar, User
from wya.services.identity_service import IdentityProvider
from wya.stores.base import UserStore

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: UserStore, identity: IdentityProvider):
        self.store = store
        self.identity = identity

    async def list_users(self) -> list[User]:
        return await self.store.list_users()

    async def get_user(self, identity_id: str) -> User:
        user = await self.store.get_user(identity_id)
        if user is None:
            raise UserNotFound(identity_id)
        return user

    async def find_by_phone(self, phone_number: str) -> User | None:
        return await self.store.find_by_phone(phone_number)

    async def signup(
        self,
        identity_id: str,
        phone_number: str | None,
        first_name: str,
        last_name: str,
        email: str | None,
    ) -> User:
        # Same phone number twice is allowed; only the identity id is unique.
        user = await self.store.create_user(identity_id, phone_number, first_name, last_name, email)
        logger.info(f"Created user {identity_id}")
        return user

    async def _update(self, identity_id: str, **fields) -> None:
        if not await self.store.update_user(identity_id, **fields):
            raise UserNotFound(identity_id)

    async def set_show_location(self, identity_id: str, show_location: bool) -> None:
        await self._update(identity_id, show_location=show_location)

    async def set_show_city(self, identity_id: str, show_city: bool) -> None:
        await self._update(identity_id, show_city=show_city)

    async def set_avatar(self, identity_id: str, avatar: Avatar) -> None:
        await self._update(identity_id, avatar=Avatar(avatar).value)

    async def set_push_token(self, identity_id: str, token: str | None) -> None:
        await self._update(identity_id, expo_push_token=token)

    async def delete_account(self, identity_id: str) -> None:
        """Remove the identity at the provider, then the stored record.

        The provider goes first; if the record then cannot be deleted the
        identity is already gone, so the failure is raised as
        OrphanedRecordError for out-of-band cleanup.
        """
        if await self.store.get_user(identity_id) is None:
            raise UserNotFound(identity_id)

        await self.identity.delete_identity(identity_id)

        try:
            deleted = await self.store.delete_user(identity_id)
        except Exception as e:
            logger.error(f"Orphaned user record {identity_id}: {e}")
            raise OrphanedRecordError(identity_id) from e
        if not deleted:
            # Record vanished between the lookup and the delete.
            logger.warning(f"User record {identity_id} was already gone after identity deletion")
        logger.info(f"Deleted account {identity_id}")
