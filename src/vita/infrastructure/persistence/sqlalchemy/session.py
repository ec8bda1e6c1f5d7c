"""Async engine, session maker and unit-of-work scope."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from vita.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyRepositoryFactory,
)

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """
    Create the async engine for a database URL.

    For SQLite the data directory is created if missing and foreign key
    enforcement is switched on for every connection, otherwise the
    cascade and set-null rules on bank accounts and transactions are
    ignored.

    Parameters
    ----------
    database_url
        SQLAlchemy async URL (``postgresql+asyncpg://`` or ``sqlite+aiosqlite://``)
    **kwargs
        Passed on to ``create_async_engine``

    Returns
    -------
    AsyncEngine instance
    """
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite and ":memory:" not in database_url and "///" in database_url:
        db_path = database_url.split("///")[-1]
        if db_path:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    kwargs.setdefault("echo", False)
    if not is_sqlite:
        kwargs.setdefault("pool_pre_ping", True)

    engine = create_async_engine(database_url, **kwargs)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def repository_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[[], Any]:
    """
    Build a unit-of-work provider for the application layer.

    Each call opens a fresh session and yields a repository factory bound
    to it. The session is committed when the block exits normally and
    rolled back when it raises.
    """

    @asynccontextmanager
    async def scope() -> AsyncIterator[SQLAlchemyRepositoryFactory]:
        async with session_maker() as session:
            try:
                yield SQLAlchemyRepositoryFactory(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return scope
