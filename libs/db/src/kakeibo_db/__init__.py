"""kakeibo_db: ledger store library (SQLAlchemy models and session helpers).

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic targeting and test bootstrapping
- ORM models in ``kakeibo_db.models.ledger`` (re-exported for convenience)
- Engine/session helpers in ``kakeibo_db.client``
"""

from __future__ import annotations

from .models.ledger import Base, KbCategory, KbTransaction

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "KbCategory",
    "KbTransaction",
]
