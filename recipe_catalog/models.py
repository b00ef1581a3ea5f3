from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

# Attribute name -> JSON key, in the order keys are written to disk.
_FIELD_KEYS = {
    "id": "id",
    "title": "title",
    "category": "category",
    "prep_time": "prepTime",
    "ingredients": "ingredients",
    "instructions": "instructions",
    "difficulty": "difficulty",
    "rating": "rating",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

# Fields a client may change through an update request.
UPDATABLE_FIELDS = (
    "title",
    "category",
    "prep_time",
    "ingredients",
    "instructions",
    "difficulty",
    "rating",
)


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_rating(value: Any) -> float:
    """Coerce a client supplied rating, falling back to ``0``."""

    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        rating = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(rating):
        return 0.0
    return rating


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: int
    title: Optional[str] = None
    category: Optional[str] = None
    prep_time: Any = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[str] = None
    difficulty: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    # Attributes holding an explicit JSON null rather than an absent key.
    null_fields: FrozenSet[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Recipe":
        """Build a recipe from its stored JSON form.

        Keys that are not part of the model are kept in :attr:`extra` and keys
        stored as ``null`` are listed in :attr:`null_fields`, so writing the
        record back reproduces it.
        """

        known = {attr: data.get(key) for attr, key in _FIELD_KEYS.items()}
        nulls = frozenset(
            attr for attr, key in _FIELD_KEYS.items() if key in data and data[key] is None
        )
        extra = {key: value for key, value in data.items() if key not in _FIELD_KEYS.values()}
        return cls(**known, extra=extra, null_fields=nulls)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for attr, key in _FIELD_KEYS.items():
            value = getattr(self, attr)
            if value is not None or attr in self.null_fields:
                data[key] = value
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    def merged(self, changes: Mapping[str, Any], *, updated_at: str) -> "Recipe":
        """Return a copy with ``changes`` applied field by field.

        ``changes`` uses JSON keys. Only :data:`UPDATABLE_FIELDS` are taken
        from it; ``id`` and ``created_at`` always keep their current values.
        A change to ``null`` is stored as ``null``.
        """

        values: Dict[str, Any] = {}
        for attr in UPDATABLE_FIELDS:
            key = _FIELD_KEYS[attr]
            if key in changes:
                values[attr] = changes[key]
        if "rating" in values:
            values["rating"] = parse_rating(values["rating"])

        nulls = set(self.null_fields) - set(values) - {"updated_at"}
        nulls.update(attr for attr, value in values.items() if value is None)
        return replace(
            self,
            **values,
            updated_at=updated_at,
            extra=dict(self.extra),
            null_fields=frozenset(nulls),
        )


__all__ = ["Recipe", "UPDATABLE_FIELDS", "parse_rating", "utc_timestamp"]
