"""
Shared fixtures: a throwaway SQLite database per test.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import insert

from vanguard_admin.database import StorageHandle, init_schema
from vanguard_admin.models import AccessContext


@pytest.fixture
def storage(tmp_path):
    handle = StorageHandle(f"sqlite:///{tmp_path / 'admin.db'}")
    yield handle
    while handle.references:
        handle.release()


@pytest.fixture
def engine(storage):
    eng = storage.acquire()
    init_schema(eng)
    return eng


@pytest.fixture
def seed(engine):
    """Insert rows with strictly increasing created_at so sort order is known."""
    base = datetime(2024, 1, 1, 12, 0, 0)

    def _seed(table, rows):
        stamped = []
        for i, row in enumerate(rows):
            row = dict(row)
            row.setdefault("created_at", base + timedelta(minutes=i))
            stamped.append(row)
        with engine.begin() as conn:
            conn.execute(insert(table), stamped)
        return stamped

    return _seed


@pytest.fixture
def ctx_for():
    def _ctx(role, user_id=1):
        return AccessContext(user_id=user_id, display_name=f"Test {role}", role=role,
                             email=f"{role}@example.org")
    return _ctx
