"""Pytest configuration for test isolation.

Commands and API helpers read ``DATABASE_URL`` (and the CLI loads a ``.env``
from the working directory). A developer's real ledger must never be touched
by tests, so the variable is cleared for every test and the working directory
is moved to the test's temporary directory. Tests that need a store bootstrap
their own SQLite file via ``tests.helpers.db``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the workspace packages importable without an install
_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT)]
    if p not in sys.path
]


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("KAKEIBO_CATEGORIES_FILE", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def db_url(tmp_path: Path):
    """A fresh SQLite ledger store seeded with the default category catalog."""

    from kakeibo.categories import DEFAULT_CATEGORIES
    from kakeibo_db.client import dispose_engines

    from tests.helpers.db import bootstrap_sqlite_db, seed_categories

    url = bootstrap_sqlite_db(tmp_path / "ledger.db")
    seed_categories(database_url=url, categories=DEFAULT_CATEGORIES)
    yield url
    dispose_engines()
