"""Shared utilities for SQLAlchemy repositories."""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def dialect_insert(session: AsyncSession, model: type[Any]) -> Any:
    """
    Return an ``INSERT`` construct that supports ``ON CONFLICT`` clauses.

    Upserts keyed by a unique constraint are atomic in the store, so
    concurrent syncs collapse duplicates instead of racing a
    check-then-insert.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    msg = f"Upserts are not supported for dialect '{dialect}'"
    raise NotImplementedError(msg)


def chunked(items: list[Any], size: int) -> list[list[Any]]:
    return [items[i : i + size] for i in range(0, len(items), size)]
