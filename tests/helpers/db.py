"""DB helpers for tests: bootstrap a temporary SQLite ledger and seed categories."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from kakeibo.models import Category
from kakeibo.persistence import replace_categories
from kakeibo_db import Base
from kakeibo_db.client import get_engine, session_scope
from kakeibo_db.models.ledger import KbTransaction
from sqlalchemy import text as sql_text


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize the schema, and return the URL.

    A file-backed database lets multiple SQLAlchemy connections share state
    (in-memory SQLite databases are per-connection).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(database_url=url)
    Base.metadata.create_all(bind=engine)
    _assert_transactions_schema_in_sync(url)
    return url


def seed_categories(*, database_url: str, categories: Sequence[Category]) -> None:
    with session_scope(database_url=database_url) as session:
        replace_categories(session, categories)


def _assert_transactions_schema_in_sync(database_url: str) -> None:
    """ORM column set matches the created SQLite table column set."""

    expected = {c.name for c in KbTransaction.__table__.columns}
    with session_scope(database_url=database_url) as session:
        rows = session.execute(sql_text("PRAGMA table_info('kb_transactions')")).fetchall()
        got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
    missing = expected - got
    extra = got - expected
    assert not missing and not extra, (
        f"kb_transactions schema drift: missing={missing or '∅'}, extra={extra or '∅'}"
    )
