import uuid

import asyncpg
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class CachingDisabledConnection(asyncpg.Connection):
    def _get_unique_id(self, prefix: str) -> str:
        return f"__asyncpg_{uuid.uuid4()}__"


def get_async_url(url: str) -> str:
    """Ensure the database URL uses the asyncpg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


def create_engine(database_url: str) -> AsyncEngine:
    # statement_cache_size=0 + CachingDisabledConnection keeps pgBouncer happy.
    return create_async_engine(
        get_async_url(database_url),
        echo=False,
        pool_size=5,
        max_overflow=5,
        pool_recycle=300,
        pool_pre_ping=True,
        connect_args={
            "statement_cache_size": 0,
            "connection_class": CachingDisabledConnection,
        },
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass
