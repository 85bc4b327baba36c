"""SQLAlchemy engine/session helpers for the ledger store.

Usage
-----
from kakeibo_db.client import session_scope

with session_scope() as s:
    s.execute(...)

Engines are cached per database URL, so a process can talk to more than one
ledger (tests bootstrap a fresh SQLite file each).
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

_ENGINES: dict[str, Engine] = {}
_SESSION_MAKERS: dict[str, sessionmaker[Session]] = {}


def _database_url(override: str | None = None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot open the ledger store")
    return url


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _):  # pragma: no cover - tiny bridge
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the engine for ``database_url`` (or ``$DATABASE_URL``), creating it once."""

    url = _database_url(database_url)
    engine = _ENGINES.get(url)
    if engine is None:
        engine = create_engine(url, pool_pre_ping=True)
        if engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(engine)
        _ENGINES[url] = engine
        _SESSION_MAKERS[url] = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
    return engine


def get_session(*, database_url: str | None = None) -> Session:
    """Return a new session bound to the engine for ``database_url``."""

    url = _database_url(database_url)
    get_engine(database_url=url)
    return _SESSION_MAKERS[url]()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Provide a transactional scope: commit on success, roll back and re-raise on error."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Dispose every cached engine (used by tests between temporary databases)."""

    for engine in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()
    _SESSION_MAKERS.clear()


__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "dispose_engines",
]
