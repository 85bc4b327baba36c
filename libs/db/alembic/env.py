# ruff: noqa: I001
"""
Alembic configuration for the ``kakeibo_db`` library.

The database URL comes from ``DATABASE_URL`` (a ``.env`` in the working
directory or at the repository root is honored) and falls back to
``sqlalchemy.url`` in ``alembic.ini``. Both offline and online migrations are
supported.
"""

from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import find_dotenv, load_dotenv
from sqlalchemy import engine_from_config, pool

# repo root: libs/db/alembic/env.py -> ../../..
_REPO_ROOT = Path(__file__).resolve().parents[3]
_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import kakeibo_db  # noqa: E402

# Load env before reading DATABASE_URL; never override values already set.
for candidate in (find_dotenv(usecwd=True), str(_REPO_ROOT / ".env")):
    if candidate and Path(candidate).is_file():
        load_dotenv(dotenv_path=candidate, override=False)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

db_url = os.getenv("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
if not db_url:
    raise RuntimeError(
        "DATABASE_URL is not set. Provide it via environment or set "
        "'sqlalchemy.url' in alembic.ini."
    )

config.set_main_option("sqlalchemy.url", db_url)
config.set_section_option(config.config_ini_section, "sqlalchemy.url", db_url)

target_metadata = kakeibo_db.metadata


def run_migrations_offline() -> None:
    """Emit SQL without a live connection."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=db_url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = db_url
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
