from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    CHAR,
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import expression as sa_expr


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: kb_categories
# ---------------------------


class KbCategory(Base):
    __tablename__ = "kb_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str] = mapped_column(String, nullable=False, server_default="#94a3b8")
    # Ordered list of match keywords; order matters only for display.
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    type: Mapped[str] = mapped_column(String, nullable=False, server_default="EXPENSE")
    # Auto-categorization scans categories by ascending sort_order.
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("type in ('EXPENSE','INCOME')", name="ck_kb_category_type"),
    )


# ---------------------------
# Core: kb_transactions
# ---------------------------


class KbTransaction(Base):
    __tablename__ = "kb_transactions"

    # UUID assigned at normalization time
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # Normalized date text exactly as imported ("2024-05-03" or "2024-5-3"); the
    # fingerprint is computed from this text, so it must round-trip unchanged.
    date: Mapped[str] = mapped_column(String, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Signed yen; negative leaves the user.
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # No FK: the catalog is owned elsewhere and categories may be deleted.
    category_id: Mapped[str] = mapped_column(String, nullable=False, server_default="other")
    is_excluded: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.false()
    )
    auto_category_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    original_row: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_manual: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=sa_expr.false())
    # SHA-256 of (date, amount, description). Not unique: identical rows within
    # one statement are all kept.
    fingerprint_sha256: Mapped[str] = mapped_column(CHAR(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "source in ('RAKUTEN','PAYPAY','JP_BANK','MANUAL')",
            name="ck_kb_tx_source",
        ),
        Index("ix_kb_tx_fingerprint", "fingerprint_sha256"),
        Index("ix_kb_tx_date", "date"),
    )


__all__ = [
    "Base",
    "KbCategory",
    "KbTransaction",
]
