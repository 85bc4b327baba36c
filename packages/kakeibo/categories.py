"""Category catalog helpers.

The pipeline only reads the catalog. This module provides the built-in default
catalog, validation for seed JSON files, and loading the live catalog from the
ledger store.

Seed JSON shape (a list, in match order)::

    [
      {"id": "food", "name": "食費", "color": "#ef4444",
       "keywords": ["スーパー", "コンビニ"], "type": "EXPENSE"},
      ...
    ]
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from kakeibo_db.client import session_scope

from .models import UNRESOLVED_CATEGORY, Category, CategoryType

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("food", "食費", "#ef4444", ("スーパー", "コンビニ", "食事")),
    Category("daily", "消耗品", "#f97316", ("ドラッグ", "薬局", "ホームセンター")),
    Category("social", "交際費", "#eab308", ("飲み会", "プレゼント", "居酒屋")),
    Category("utilities", "水道光熱費", "#3b82f6", ("電気", "ガス", "水道", "電力")),
    Category(
        "transport", "交通費", "#06b6d4", ("鉄道", "バス", "タクシー", "ETC", "Suica", "PASMO")
    ),
    Category(
        "subscription", "サブスク", "#8b5cf6", ("Netflix", "Spotify", "Amazon Prime", "Apple")
    ),
    Category("credit_card", "カード引落", "#6366f1", ("三井住友", "SMCC", "カード")),
    Category("income", "給与・収入", "#22c55e", ("給料", "振込", "賞与"), CategoryType.INCOME),
    Category(UNRESOLVED_CATEGORY, "その他", "#94a3b8", ()),
)


# ---------------------------
# Seed file validation
# ---------------------------


class CategorySeed(BaseModel):
    """One catalog entry as stored in a seed JSON file."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    id: str
    name: str
    color: str = "#94a3b8"
    keywords: list[str] = []
    type: CategoryType = CategoryType.EXPENSE

    @field_validator("id", "name")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must be non-empty")
        return v

    @field_validator("keywords")
    @classmethod
    def _drop_blank_keywords(cls, v: list[str]) -> list[str]:
        return [k.strip() for k in v if k.strip()]

    def to_category(self) -> Category:
        return Category(self.id, self.name, self.color, tuple(self.keywords), self.type)


_SEED_LIST = TypeAdapter(list[CategorySeed])


def parse_category_seed(data: object) -> list[Category]:
    """Validate decoded seed JSON and return catalog entries in file order.

    Raises ``ValueError`` (``pydantic.ValidationError``) on schema problems or
    duplicate ids.
    """

    seeds = _SEED_LIST.validate_python(data)
    seen: set[str] = set()
    for s in seeds:
        if s.id in seen:
            raise ValueError(f"duplicate category id in seed: {s.id!r}")
        seen.add(s.id)
    return [s.to_category() for s in seeds]


def load_category_seed(path: str | Path) -> list[Category]:
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_category_seed(data)


def default_catalog_json() -> list[dict[str, object]]:
    return [
        {
            "id": c.id,
            "name": c.name,
            "color": c.color,
            "keywords": list(c.keywords),
            "type": str(c.type),
        }
        for c in DEFAULT_CATEGORIES
    ]


# ---------------------------
# Store access
# ---------------------------


def load_categories_from_db(*, database_url: str | None) -> list[Category]:
    """Return the live catalog ordered for matching.

    Raises ``RuntimeError`` when the store holds no categories.
    """

    from .persistence import load_categories  # local import

    with session_scope(database_url=database_url) as session:
        categories = load_categories(session)
    if not categories:
        raise RuntimeError("no categories present in kb_categories; run seed-categories")
    return categories


def category_names(categories: Sequence[Category]) -> dict[str, str]:
    """Map category id to display name."""

    return {c.id: c.name for c in categories}


__all__ = [
    "DEFAULT_CATEGORIES",
    "CategorySeed",
    "parse_category_seed",
    "load_category_seed",
    "default_catalog_json",
    "load_categories_from_db",
    "category_names",
]
