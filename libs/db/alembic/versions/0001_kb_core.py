# ruff: noqa: I001
"""Ledger core tables and the default category catalog.

Revision ID: 0001_kb_core
Revises: None
Create Date: 2026-10-17
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_kb_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


# Mirrors kakeibo.categories.DEFAULT_CATEGORIES at the time of this revision.
_DEFAULT_CATEGORIES: tuple[tuple[str, str, str, list[str], str], ...] = (
    ("food", "食費", "#ef4444", ["スーパー", "コンビニ", "食事"], "EXPENSE"),
    ("daily", "消耗品", "#f97316", ["ドラッグ", "薬局", "ホームセンター"], "EXPENSE"),
    ("social", "交際費", "#eab308", ["飲み会", "プレゼント", "居酒屋"], "EXPENSE"),
    ("utilities", "水道光熱費", "#3b82f6", ["電気", "ガス", "水道", "電力"], "EXPENSE"),
    ("transport", "交通費", "#06b6d4", ["鉄道", "バス", "タクシー", "ETC", "Suica", "PASMO"], "EXPENSE"),
    ("subscription", "サブスク", "#8b5cf6", ["Netflix", "Spotify", "Amazon Prime", "Apple"], "EXPENSE"),
    ("credit_card", "カード引落", "#6366f1", ["三井住友", "SMCC", "カード"], "EXPENSE"),
    ("income", "給与・収入", "#22c55e", ["給料", "振込", "賞与"], "INCOME"),
    ("other", "その他", "#94a3b8", [], "EXPENSE"),
)


def upgrade() -> None:
    op.create_table(
        "kb_categories",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("color", sa.String(), nullable=False, server_default="#94a3b8"),
        sa.Column("keywords", sa.JSON(), nullable=False),
        sa.Column("type", sa.String(), nullable=False, server_default="EXPENSE"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("type in ('EXPENSE','INCOME')", name="ck_kb_category_type"),
    )

    op.create_table(
        "kb_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("date", sa.String(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("category_id", sa.String(), nullable=False, server_default="other"),
        sa.Column("is_excluded", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("auto_category_reason", sa.Text(), nullable=True),
        sa.Column("original_row", sa.JSON(), nullable=False),
        sa.Column("is_manual", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("fingerprint_sha256", sa.CHAR(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "source in ('RAKUTEN','PAYPAY','JP_BANK','MANUAL')",
            name="ck_kb_tx_source",
        ),
    )
    op.create_index("ix_kb_tx_fingerprint", "kb_transactions", ["fingerprint_sha256"])
    op.create_index("ix_kb_tx_date", "kb_transactions", ["date"])

    op.bulk_insert(
        sa.table(
            "kb_categories",
            sa.column("id", sa.String()),
            sa.column("name", sa.String()),
            sa.column("color", sa.String()),
            sa.column("keywords", sa.JSON()),
            sa.column("type", sa.String()),
            sa.column("sort_order", sa.Integer()),
        ),
        [
            {"id": cid, "name": name, "color": color, "keywords": kws, "type": kind, "sort_order": i}
            for i, (cid, name, color, kws, kind) in enumerate(_DEFAULT_CATEGORIES)
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_kb_tx_date", table_name="kb_transactions")
    op.drop_index("ix_kb_tx_fingerprint", table_name="kb_transactions")
    op.drop_table("kb_transactions")
    op.drop_table("kb_categories")
