"""
Database engine lifecycle, per-connection setup and schema creation.
"""

import sys
import threading
from typing import Optional

from sqlalchemy import String, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

from vanguard_admin.config import get_env
from vanguard_admin.tables import metadata

SQLITE_FOLD_FUNCTION = "casefold"


# ── Case folding ─────────────────────────────────────────────────────

class fold_case(FunctionElement):
    """Unicode-aware lower-casing of a string expression.

    SQLite's built-in lower() only folds ASCII, so on SQLite this compiles
    to a Python function registered on every connection.
    """
    type = String()
    name = "fold_case"
    inherit_cache = True


@compiles(fold_case)
def _fold_case_default(element, compiler, **kw):
    return "lower(%s)" % compiler.process(element.clauses, **kw)


@compiles(fold_case, "sqlite")
def _fold_case_sqlite(element, compiler, **kw):
    return "%s(%s)" % (SQLITE_FOLD_FUNCTION, compiler.process(element.clauses, **kw))


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record):
    dbapi_connection.create_function(SQLITE_FOLD_FUNCTION, 1, _casefold, deterministic=True)


class StorageHandle:
    """Lazily-initialised, reference-counted SQLAlchemy engine.

    The first ``acquire()`` creates the engine and verifies the connection;
    later calls only bump the reference count and return the same engine.
    The engine is disposed when the last holder calls ``release()``.
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False):
        self._url = url
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._refs = 0
        self._lock = threading.Lock()

    @property
    def url(self) -> str:
        if self._url is None:
            self._url = get_env("DATABASE_URL")
        return self._url

    @property
    def references(self) -> int:
        return self._refs

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("StorageHandle.acquire() has not been called.")
        return self._engine

    def acquire(self) -> Engine:
        with self._lock:
            if self._engine is None:
                self._engine = _connect(self.url, self._echo)
            self._refs += 1
            return self._engine

    def release(self) -> None:
        with self._lock:
            if self._refs == 0:
                return
            self._refs -= 1
            if self._refs == 0 and self._engine is not None:
                self._engine.dispose()
                self._engine = None
                print("[db] Engine disposed.")

    def __enter__(self) -> Engine:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


def _connect(url: str, echo: bool) -> Engine:
    """Create an engine and verify the connection with ``SELECT 1``."""
    is_sqlite = url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_engine(url, echo=echo, future=True, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _register_sqlite_functions)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        engine.dispose()
        print(f"ERROR: could not connect to DB at {engine.url!r}", file=sys.stderr)
        raise
    print("[init] Connected to DB.")
    return engine


def init_schema(engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
