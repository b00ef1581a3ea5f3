"""Filtering, searching and category listing over an in-memory recipe list."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from .models import Recipe


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _parse_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    number = _as_number(raw.strip())
    if number is None or math.isinf(number):
        return None
    return number


def _parse_int(raw: Optional[str]) -> Optional[int]:
    number = _parse_float(raw)
    return int(number) if number is not None else None


def _same_text(value: Any, expected: str) -> bool:
    return isinstance(value, str) and value.lower() == expected.lower()


@dataclass(frozen=True)
class RecipeFilters:
    """Optional list filters; every supplied filter must match."""

    category: Optional[str] = None
    difficulty: Optional[str] = None
    min_rating: Optional[float] = None
    max_time: Optional[int] = None

    @classmethod
    def from_query(cls, args: Mapping[str, str]) -> "RecipeFilters":
        """Parse query-string arguments.

        Empty values and numbers that cannot be parsed count as not supplied.
        """

        return cls(
            category=args.get("category") or None,
            difficulty=args.get("difficulty") or None,
            min_rating=_parse_float(args.get("minRating")),
            max_time=_parse_int(args.get("maxTime")),
        )

    def matches(self, recipe: Recipe) -> bool:
        if self.category is not None and not _same_text(recipe.category, self.category):
            return False
        if self.difficulty is not None and not _same_text(recipe.difficulty, self.difficulty):
            return False
        if self.min_rating is not None:
            rating = _as_number(recipe.rating)
            if rating is None or rating < self.min_rating:
                return False
        if self.max_time is not None:
            prep_time = _as_number(recipe.prep_time)
            if prep_time is None or prep_time > self.max_time:
                return False
        return True


def filter_recipes(recipes: Iterable[Recipe], filters: Optional[RecipeFilters] = None) -> List[Recipe]:
    if filters is None:
        return list(recipes)
    return [recipe for recipe in recipes if filters.matches(recipe)]


def search_recipes(recipes: Iterable[Recipe], term: str) -> List[Recipe]:
    """Return recipes whose title or any ingredient contains ``term``.

    Matching is a case-insensitive substring test and results keep store order.
    The caller is responsible for rejecting an empty term.
    """

    needle = term.lower()
    results = []
    for recipe in recipes:
        title = recipe.title if isinstance(recipe.title, str) else ""
        ingredients = recipe.ingredients or []
        if needle in title.lower() or any(
            isinstance(ingredient, str) and needle in ingredient.lower()
            for ingredient in ingredients
        ):
            results.append(recipe)
    return results


def distinct_categories(recipes: Iterable[Recipe]) -> List[str]:
    """Return the distinct categories in the order they first appear.

    Categories differing only in case are the same category, matching the
    case-insensitive category filter; the first spelling seen is kept.
    """

    seen = set()
    categories = []
    for recipe in recipes:
        category = recipe.category
        if not isinstance(category, str) or not category:
            continue
        folded = category.lower()
        if folded in seen:
            continue
        seen.add(folded)
        categories.append(category)
    return categories


__all__ = ["RecipeFilters", "distinct_categories", "filter_recipes", "search_recipes"]
