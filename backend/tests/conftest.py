from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wya.core.deps import get_identity_provider, get_push_client, get_store
from wya.main import app
from wya.services.identity_service import IdentityProvider
from wya.services.push_service import ExpoPushClient
from wya.stores.memory import MemoryStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
VALID_TOKEN = "ExponentPushToken[xxxxxxxxxxxxxxxxxxxxxx]"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def identity():
    provider = AsyncMock(spec=IdentityProvider)
    provider.delete_identity.return_value = True
    return provider


@pytest.fixture
def push():
    client = AsyncMock(spec=ExpoPushClient)
    client.send.return_value = [{"status": "ok", "id": "ticket-1"}]
    return client


@pytest.fixture
def make_user(store):
    """Create a user and apply field overrides, e.g. ``await make_user("alice", show_location=True)``."""
    async def _make(identity_id: str, first_name: str | None = None, **fields):
        await store.create_user(
            identity_id,
            phone_number=fields.pop("phone_number", None),
            first_name=first_name or identity_id.capitalize(),
            last_name="Tester",
            email=fields.pop("email", f"{identity_id}@example.com"),
        )
        if fields:
            await store.update_user(identity_id, **fields)
        return await store.get_user(identity_id)
    return _make


def days_ago(days: int) -> datetime:
    return NOW - timedelta(days=days)


@pytest_asyncio.fixture
async def api_client(store, identity, push):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_push_client] = lambda: push
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
