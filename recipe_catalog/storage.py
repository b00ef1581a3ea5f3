from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Protocol, Sequence

from .models import Recipe

if TYPE_CHECKING:  # pragma: no cover
    from .config import Settings


logger = logging.getLogger(__name__)

RECIPES_FILENAME = "recipes.json"

SEED_RECIPES = (
    {
        "id": 1,
        "title": "Spaghetti Carbonara",
        "category": "Pasta",
        "prepTime": 30,
        "ingredients": ["spaghetti", "bacon", "eggs", "parmesan", "black pepper"],
        "instructions": "1. Cook the pasta...",
        "difficulty": "Medium",
        "rating": 4.8,
    },
    {
        "id": 2,
        "title": "Vegetable Omelette",
        "category": "Breakfast",
        "prepTime": 15,
        "ingredients": ["eggs", "tomatoes", "onion", "bell pepper", "salt"],
        "instructions": "1. Chop the vegetables...",
        "difficulty": "Easy",
        "rating": 4.5,
    },
)


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the recipe catalog."""

    def load(self) -> List[Recipe]:
        """Return every stored recipe in insertion order."""

    def save(self, recipes: Sequence[Recipe]) -> None:
        """Replace the stored collection with ``recipes``."""


class JsonFileRecipeStorage(RecipeRepository):
    """Recipe storage backed by a single JSON document.

    The document has the shape ``{"recipes": [...]}``. Every call reads or
    writes the whole file; nothing is cached between calls and there is no
    locking, so concurrent writers race and the last write wins.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "JsonFileRecipeStorage":
        return cls(settings.data_dir / RECIPES_FILENAME)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Recipe]:
        if not self._path.exists():
            seed = [Recipe.from_dict(data) for data in SEED_RECIPES]
            logger.info("Recipe store %s not found; writing seed recipes.", self._path)
            self.save(seed)
            return seed

        try:
            with self._path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
            records = document["recipes"]
            if not isinstance(records, list):
                raise TypeError("'recipes' is not a list")
            return [Recipe.from_dict(data) for data in records]
        except (OSError, ValueError, TypeError, KeyError, AttributeError) as exc:
            # Unreadable stores behave like an empty catalog.
            logger.warning("Could not read recipe store %s: %s", self._path, exc)
            return []

    def save(self, recipes: Sequence[Recipe]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        document = {"recipes": [recipe.to_dict() for recipe in recipes]}
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2, ensure_ascii=False)


__all__ = ["JsonFileRecipeStorage", "RecipeRepository", "SEED_RECIPES"]
