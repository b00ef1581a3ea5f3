from __future__ import annotations

import logging
from typing import Any, List, Optional

from .models import Recipe, parse_rating, utc_timestamp
from .queries import RecipeFilters, distinct_categories, filter_recipes, search_recipes
from .storage import RecipeRepository


logger = logging.getLogger(__name__)

# Optional fields a create request may set to an explicit null.
_NULLABLE_CREATE_KEYS = {
    "prep_time": "prepTime",
    "instructions": "instructions",
    "difficulty": "difficulty",
}


class RecipeValidationError(ValueError):
    """Raised when a request is missing something it requires."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecipeNotFound(KeyError):
    """Raised when no recipe has the requested id."""

    def __init__(self, recipe_id: Any) -> None:
        super().__init__(recipe_id)
        self.recipe_id = recipe_id
        self.message = "Recipe not found"

    def __str__(self) -> str:
        return f"Recipe '{self.recipe_id}' does not exist."


def _parse_id(recipe_id: Any) -> Optional[int]:
    if isinstance(recipe_id, bool):
        return None
    if isinstance(recipe_id, int):
        return recipe_id
    try:
        return int(str(recipe_id).strip())
    except ValueError:
        return None


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise RecipeValidationError("Request body must be a JSON object")
    return payload


def _required_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def next_recipe_id(recipes: List[Recipe]) -> int:
    ids = [recipe.id for recipe in recipes if isinstance(recipe.id, int)]
    return max(ids) + 1 if ids else 1


class RecipeCatalog:
    """Recipe operations on top of a :class:`RecipeRepository`.

    Every operation loads the full collection, works on it in memory and,
    when it changes something, saves the full collection back.
    """

    def __init__(self, storage: RecipeRepository) -> None:
        self._storage = storage

    @property
    def storage(self) -> RecipeRepository:
        return self._storage

    def list_recipes(self, filters: Optional[RecipeFilters] = None) -> List[Recipe]:
        return filter_recipes(self._storage.load(), filters)

    def search(self, term: Optional[str]) -> List[Recipe]:
        if not term:
            raise RecipeValidationError("Search query parameter 'q' is required")
        return search_recipes(self._storage.load(), term)

    def categories(self) -> List[str]:
        return distinct_categories(self._storage.load())

    def get_recipe(self, recipe_id: Any) -> Recipe:
        recipes = self._storage.load()
        return recipes[self._index_of(recipes, recipe_id)]

    def create_recipe(self, payload: Any) -> Recipe:
        data = _require_object(payload)
        if not _required_text(data.get("title")) or not _required_text(data.get("category")):
            raise RecipeValidationError("Title and category are required")

        recipes = self._storage.load()
        ingredients = data.get("ingredients")
        recipe = Recipe(
            id=next_recipe_id(recipes),
            title=data["title"],
            category=data["category"],
            prep_time=data.get("prepTime"),
            ingredients=ingredients if ingredients is not None else [],
            instructions=data.get("instructions"),
            difficulty=data.get("difficulty"),
            rating=parse_rating(data.get("rating")),
            created_at=utc_timestamp(),
            null_fields=frozenset(
                attr for attr, key in _NULLABLE_CREATE_KEYS.items() if key in data and data[key] is None
            ),
        )
        recipes.append(recipe)
        self._storage.save(recipes)
        logger.info("Created recipe %s (%s).", recipe.id, recipe.title)
        return recipe

    def update_recipe(self, recipe_id: Any, payload: Any) -> Recipe:
        changes = _require_object(payload)
        recipes = self._storage.load()
        index = self._index_of(recipes, recipe_id)

        updated = recipes[index].merged(changes, updated_at=utc_timestamp())
        recipes[index] = updated
        self._storage.save(recipes)
        logger.info("Updated recipe %s.", updated.id)
        return updated

    def delete_recipe(self, recipe_id: Any) -> Recipe:
        recipes = self._storage.load()
        index = self._index_of(recipes, recipe_id)

        removed = recipes.pop(index)
        self._storage.save(recipes)
        logger.info("Deleted recipe %s.", removed.id)
        return removed

    @staticmethod
    def _index_of(recipes: List[Recipe], recipe_id: Any) -> int:
        wanted = _parse_id(recipe_id)
        if wanted is not None:
            for index, recipe in enumerate(recipes):
                if recipe.id == wanted:
                    return index
        raise RecipeNotFound(recipe_id)


__all__ = [
    "RecipeCatalog",
    "RecipeNotFound",
    "RecipeValidationError",
    "next_recipe_id",
]
