"""
RootNote Backend — Database Engine & Session Helpers
====================================================

What:  Declarative base, async engine/session factory builders, and a
       transactional session scope.
How:   The plant store calls build_engine() and build_session_factory()
       when it is opened and wraps every operation in session_scope(),
       which commits on success and rolls back on error.
Who:   Used by rootnote.services.plant_store and by Alembic (Base.metadata).

Nothing here is created at import time: the engine belongs to the store
instance that opened it and is disposed when that store is closed.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the store's `create_all` on startup
    and Alembic's migration environment.
    """
    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the given URL.

    pool_pre_ping validates pooled connections before use, so a database
    file replaced underneath a running server surfaces as a clean reconnect
    instead of a stale handle.
    """
    return create_async_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create a session factory bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after the
    session commits, so ORM rows can be serialized after the scope exits.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide a transactional session for one store operation.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller (which runs its single statement)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
