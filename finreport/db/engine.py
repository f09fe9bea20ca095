# =============================================================================
# Database Engine & Session Management
# =============================================================================
#
# Async SQLAlchemy engine for the live Record Store. All reads go through
# `async with session_factory() as session:` blocks owned by RecordStore
# (services/record_store.py); route handlers never touch sessions directly.
#
# LAZY INITIALIZATION:
# The engine is created on first use, not at import time. In simulation mode
# (the default) no engine is ever created, so the service starts without a
# database driver or a reachable database.
#
# Tests build their own engine (file-backed sqlite+aiosqlite) and hand its
# session factory to RecordStore, bypassing this module entirely.
# =============================================================================

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from finreport.config import settings

_async_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_async_engine() -> AsyncEngine:
    """Lazily create and cache the async SQLAlchemy engine."""
    global _async_engine
    if _async_engine is None:
        # echo=debug logs every SQL statement; pool sizing is left at the
        # dialect defaults so SQLite URLs work too.
        _async_engine = create_async_engine(
            settings.database_url,
            echo=settings.debug,
            pool_pre_ping=True,
        )
    return _async_engine


def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Lazily create and cache the async session factory.

    expire_on_commit=False keeps loaded rows readable after the session
    closes; strategies shape rows into response dicts after the
    `async with` block has exited.
    """
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            bind=get_async_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def dispose_engine() -> None:
    """Close pooled connections (called from the FastAPI lifespan)."""
    global _async_engine, _async_session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_session_factory = None
