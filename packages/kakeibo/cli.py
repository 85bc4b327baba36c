# ruff: noqa: I001
"""CLI for the ``kakeibo`` package.

A Typer-based console interface. Environment variables (notably
``DATABASE_URL``) are loaded from a local ``.env`` using ``python-dotenv``
before delegating to command logic. Business logic lives in ``kakeibo.api``
and related modules.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo

from .logging_setup import configure_logging

# Errors shown per file in the import report before truncating.
_MAX_ERRORS_SHOWN = 3

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
STATEMENT_PATHS_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Statement CSV exports (Rakuten Card, PayPay, JP Bank)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the importer reports unreadable files per file
)


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import Rakuten Card, PayPay and JP Bank CSV exports into a deduplicated, "
        "categorized household ledger. Loads DATABASE_URL from a local .env."
    ),
)


@app.command("import")
def import_cmd(
    paths: Annotated[list[Path], STATEMENT_PATHS_ARGUMENT],
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    dry_run: bool = typer.Option(
        False, help="Parse, deduplicate and categorize without writing to the ledger."
    ),
) -> None:
    """Import statement files into the ledger."""

    from .api import import_paths_to_db

    try:
        report = import_paths_to_db(paths, database_url=database_url, dry_run=dry_run)
    except Exception as e:
        typer.echo(f"Error: import failed: {e}", err=True)
        raise typer.Exit(1) from e

    for f in report.files:
        typer.echo(
            f"{f.name}\t{f.source_kind}\tparsed={f.parsed}\texcluded={f.excluded}"
            f"\tappended={f.appended}"
        )
        for err in f.errors[:_MAX_ERRORS_SHOWN]:
            typer.echo(f"  {err}", err=True)
        if len(f.errors) > _MAX_ERRORS_SHOWN:
            typer.echo(f"  ... {len(f.errors) - _MAX_ERRORS_SHOWN} more", err=True)

    total = len(report.appended)
    excluded = sum(1 for tx in report.appended if tx.is_excluded)
    verb = "Would import" if dry_run else "Imported"
    typer.echo(f"{verb} {total} transactions ({excluded} excluded to avoid double counting)")

    if report.files and all(f.parsed == 0 and f.errors for f in report.files):
        raise typer.Exit(1)


@app.command("parse")
def parse_cmd(
    path: Annotated[Path, typer.Argument(help="Statement CSV export", dir_okay=False)],
) -> None:
    """Parse one file and print its transactions as JSON lines (no ledger access)."""

    from .ingest.utils import parse_statement, read_statement_file

    try:
        statement = read_statement_file(path)
    except OSError as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(1) from e

    result = parse_statement(statement)
    for tx in result.transactions:
        typer.echo(json.dumps(tx.to_dict(), ensure_ascii=False))
    for err in result.errors:
        typer.echo(f"{result.name}: {err}", err=True)
    if result.source_kind == "UNKNOWN":
        raise typer.Exit(1)


@app.command("summary")
def summary_cmd(
    *,
    month: str | None = typer.Option(None, help="Month as YYYY-MM (default: all months)."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Print income, expense and excluded totals with a per-category breakdown."""

    from .api import report_summary_from_db

    try:
        typer.echo(report_summary_from_db(month=month, database_url=database_url))
    except Exception as e:
        typer.echo(f"Error: summary failed: {e}", err=True)
        raise typer.Exit(1) from e


@app.command("seed-categories")
def seed_categories_cmd(
    *,
    file: Path | None = typer.Option(
        None,
        help="Category seed JSON (defaults to $KAKEIBO_CATEGORIES_FILE, else built-ins).",
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Replace the category catalog."""

    from kakeibo_db.client import session_scope

    from .categories import DEFAULT_CATEGORIES, load_category_seed
    from .persistence import replace_categories

    seed_path = file or (Path(p) if (p := os.getenv("KAKEIBO_CATEGORIES_FILE")) else None)
    try:
        categories = load_category_seed(seed_path) if seed_path else list(DEFAULT_CATEGORIES)
        with session_scope(database_url=database_url) as session:
            n = replace_categories(session, categories)
    except Exception as e:
        typer.echo(f"Error: seeding categories failed: {e}", err=True)
        raise typer.Exit(1) from e
    typer.echo(f"Seeded {n} categories")


@app.command("add-manual")
def add_manual_cmd(
    *,
    date: str = typer.Option(..., help="Transaction date (YYYY-MM-DD)."),
    description: str = typer.Option(..., help="Merchant or memo."),
    amount: int = typer.Option(..., help="Signed yen amount; negative for spending."),
    category: str | None = typer.Option(
        None, help="Category id (auto-categorized when omitted)."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Record a manual (e.g., cash) transaction."""

    from .api import record_manual_transaction

    try:
        tx = record_manual_transaction(
            date=date,
            description=description,
            amount=amount,
            category_id=category,
            database_url=database_url,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e
    except Exception as e:
        typer.echo(f"Error: recording transaction failed: {e}", err=True)
        raise typer.Exit(1) from e
    typer.echo(f"{tx.id}\t{tx.date}\t{tx.amount}\t{tx.category_id}")


@app.command("edit")
def edit_cmd(
    tx_id: Annotated[str, typer.Argument(help="Transaction id (see `parse` or the ledger).")],
    *,
    category: str | None = typer.Option(None, help="New category id."),
    excluded: bool | None = typer.Option(
        None,
        "--excluded/--included",
        help="Exclude from totals, or count it again.",
        show_default=False,
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Re-categorize a stored transaction or toggle its exclusion."""

    from .api import edit_transaction_in_db

    if category is None and excluded is None:
        typer.echo("Error: nothing to change; pass --category or --excluded/--included", err=True)
        raise typer.Exit(2)
    try:
        tx = edit_transaction_in_db(
            tx_id, category_id=category, is_excluded=excluded, database_url=database_url
        )
    except LookupError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    except Exception as e:
        typer.echo(f"Error: editing transaction failed: {e}", err=True)
        raise typer.Exit(1) from e
    flag = "excluded" if tx.is_excluded else "included"
    typer.echo(f"{tx.id}\t{tx.date}\t{tx.amount}\t{tx.category_id}\t{flag}")


@app.command("delete")
def delete_cmd(
    tx_id: Annotated[str, typer.Argument(help="Transaction id.")],
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Delete a stored transaction."""

    from .api import delete_transaction_from_db

    try:
        deleted = delete_transaction_from_db(tx_id, database_url=database_url)
    except Exception as e:
        typer.echo(f"Error: deleting transaction failed: {e}", err=True)
        raise typer.Exit(1) from e
    if not deleted:
        typer.echo(f"Error: no transaction with id {tx_id!r}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted {tx_id}")


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    app()
