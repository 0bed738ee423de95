"""
Single-record reads and writes backing the mutation endpoints.
"""

import sys
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from vanguard_admin.errors import Conflict, QueryFailed


def _storage_error(action: str, table, exc: Exception) -> QueryFailed:
    print(f"[ERROR] Failed to {action} '{table.name}' record: {exc}", file=sys.stderr)
    return QueryFailed(f"Failed to {action} record", details=str(exc))


def fetch_one(engine, table, record_id: int) -> Optional[Dict[str, Any]]:
    stmt = select(table).where(table.c.id == record_id)
    try:
        with engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
    except SQLAlchemyError as e:
        raise _storage_error("fetch", table, e) from e
    return dict(row) if row is not None else None


def insert_one(engine, table, values: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a record and return it as stored; unique violations raise Conflict."""
    try:
        with engine.begin() as conn:
            result = conn.execute(insert(table).values(**values))
            new_id = result.inserted_primary_key[0]
            row = conn.execute(select(table).where(table.c.id == new_id)).mappings().one()
    except IntegrityError as e:
        raise Conflict("A record with the same unique value already exists") from e
    except SQLAlchemyError as e:
        raise _storage_error("create", table, e) from e
    return dict(row)


def update_one(engine, table, record_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply *values* to one record; returns the updated row or None if absent."""
    stmt = (
        update(table)
        .where(table.c.id == record_id)
        .values(**values, updated_at=datetime.utcnow(), revision=table.c.revision + 1)
    )
    try:
        with engine.begin() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                return None
            row = conn.execute(select(table).where(table.c.id == record_id)).mappings().one()
    except IntegrityError as e:
        raise Conflict("A record with the same unique value already exists") from e
    except SQLAlchemyError as e:
        raise _storage_error("update", table, e) from e
    return dict(row)


def delete_one(engine, table, record_id: int) -> bool:
    try:
        with engine.begin() as conn:
            result = conn.execute(delete(table).where(table.c.id == record_id))
    except SQLAlchemyError as e:
        raise _storage_error("delete", table, e) from e
    return result.rowcount > 0
