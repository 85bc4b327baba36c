"""ORM models for the household ledger."""

from .ledger import Base, KbCategory, KbTransaction

__all__ = [
    "Base",
    "KbCategory",
    "KbTransaction",
]
