"""
Unit tests for the storage handle and SQL helpers.
"""

import pytest
from sqlalchemy import column, literal, select, text
from sqlalchemy.dialects import postgresql, sqlite

from vanguard_admin.database import SQLITE_FOLD_FUNCTION, StorageHandle, fold_case


# ── Tests: StorageHandle ─────────────────────────────────────────────

def test_engine_is_shared_and_refcounted(tmp_path, capsys):
    handle = StorageHandle(f"sqlite:///{tmp_path / 'x.db'}")
    first = handle.acquire()
    second = handle.acquire()
    assert first is second
    assert handle.references == 2

    handle.release()
    with handle.engine.connect() as conn:
        assert conn.execute(text("SELECT 1")).scalar() == 1

    handle.release()
    assert handle.references == 0
    assert "[db] Engine disposed." in capsys.readouterr().out
    with pytest.raises(RuntimeError):
        handle.engine


def test_release_without_acquire_is_a_no_op():
    handle = StorageHandle("sqlite://")
    handle.release()
    assert handle.references == 0


def test_context_manager(tmp_path):
    handle = StorageHandle(f"sqlite:///{tmp_path / 'y.db'}")
    with handle as engine:
        assert handle.references == 1
        assert engine is handle.engine
    assert handle.references == 0


def test_missing_database_url_exits(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(SystemExit):
        StorageHandle().acquire()


# ── Tests: case folding ──────────────────────────────────────────────

def test_fold_case_compiles_per_dialect():
    expr = fold_case(column("name"))
    assert str(expr.compile(dialect=postgresql.dialect())) == "lower(name)"
    assert str(expr.compile(dialect=sqlite.dialect())) == f"{SQLITE_FOLD_FUNCTION}(name)"


def test_sqlite_connections_fold_unicode(tmp_path):
    with StorageHandle(f"sqlite:///{tmp_path / 'z.db'}") as engine:
        with engine.connect() as conn:
            folded = conn.execute(select(fold_case(literal("ÉCOLE")))).scalar()
    assert folded == "école"
