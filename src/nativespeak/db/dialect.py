"""Dialect-aware INSERT construct for ON CONFLICT statements.

PostgreSQL and SQLite both support ``ON CONFLICT ... DO UPDATE / DO NOTHING``
with the same SQLAlchemy API, but through dialect-specific ``insert()``
functions.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def upsert_insert(db: AsyncSession, table: Any) -> Any:  # noqa: ANN401
    """Return an ``INSERT`` for *table* that supports ``on_conflict_*`` on the session's dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(table)
    if dialect == "sqlite":
        return sqlite_insert(table)
    msg = f"ON CONFLICT inserts are not supported on dialect '{dialect}'"
    raise RuntimeError(msg)
