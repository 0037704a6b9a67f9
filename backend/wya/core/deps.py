from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, Request

from wya.core.config import Settings, get_settings
from wya.services.identity_service import IdentityProvider
from wya.services.location_service import LocationService
from wya.services.notification_service import NotificationService
from wya.services.push_service import ExpoPushClient
from wya.services.user_service import UserService
from wya.services.visibility_service import VisibilityService
from wya.stores.base import UserStore
from wya.stores.sql import SqlStore


@asynccontextmanager
async def open_store(state) -> AsyncIterator[UserStore]:
    """Store for one unit of work: the shared in-memory store, or a fresh SQL session."""
    memory_store = getattr(state, "memory_store", None)
    if memory_store is not None:
        yield memory_store
        return
    async with state.session_factory() as session:
        yield SqlStore(session)


async def get_store(request: Request) -> AsyncIterator[UserStore]:
    async with open_store(request.app.state) as store:
        yield store


def get_push_client(settings: Settings = Depends(get_settings)) -> ExpoPushClient:
    return ExpoPushClient(
        settings.expo_push_url,
        access_token=settings.expo_access_token,
        timeout=settings.http_timeout_seconds,
    )


def get_identity_provider(settings: Settings = Depends(get_settings)) -> IdentityProvider:
    return IdentityProvider(
        settings.supabase_url,
        settings.supabase_service_role_key,
        timeout=settings.http_timeout_seconds,
    )


def get_user_service(
    store: UserStore = Depends(get_store),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserService:
    return UserService(store, identity)


def get_location_service(store: UserStore = Depends(get_store)) -> LocationService:
    return LocationService(store)


def get_visibility_service(store: UserStore = Depends(get_store)) -> VisibilityService:
    return VisibilityService(store)


def get_notification_service(
    store: UserStore = Depends(get_store),
    push: ExpoPushClient = Depends(get_push_client),
    settings: Settings = Depends(get_settings),
) -> NotificationService:
    return NotificationService(store, push, inactivity_days=settings.inactivity_days)
