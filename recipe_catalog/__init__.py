import logging
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from .catalog import RecipeCatalog, RecipeNotFound, RecipeValidationError
from .config import Settings
from .models import Recipe
from .queries import RecipeFilters
from .request_log import init_request_logging
from .storage import JsonFileRecipeStorage, RecipeRepository

logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[RecipeRepository] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application uses a
        :class:`JsonFileRecipeStorage` in ``settings.data_dir``.
    settings:
        Optional configuration. When ``None`` it is read from environment
        variables with :meth:`Settings.from_env`.
    """

    app = Flask(__name__)
    app.json.sort_keys = False
    app.url_map.strict_slashes = False

    if settings is None:
        settings = Settings.from_env()
    _configure_logging(settings.log_level)

    if storage is None:
        storage = JsonFileRecipeStorage.from_settings(settings)
    app.config["RECIPE_SETTINGS"] = settings
    app.config["RECIPE_CATALOG"] = RecipeCatalog(storage)

    init_request_logging(app, settings.request_log_path)

    def catalog() -> RecipeCatalog:
        return app.config["RECIPE_CATALOG"]

    @app.get("/api/recipes")
    def list_recipes() -> Response:
        filters = RecipeFilters.from_query(request.args)
        try:
            recipes = catalog().list_recipes(filters)
        except Exception:
            logger.exception("Failed to list recipes")
            return _error("Failed to fetch recipes", 500)
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/api/recipes/categories")
    def list_categories() -> Response:
        try:
            categories = catalog().categories()
        except Exception:
            logger.exception("Failed to list categories")
            return _error("Failed to fetch categories", 500)
        return jsonify(categories)

    @app.get("/api/recipes/search")
    def search_recipes() -> Response:
        try:
            recipes = catalog().search(request.args.get("q"))
        except RecipeValidationError as exc:
            return _error(exc.message, 400)
        except Exception:
            logger.exception("Failed to search recipes")
            return _error("Failed to search recipes", 500)
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/api/recipes/<recipe_id>")
    def get_recipe(recipe_id: str) -> Response:
        try:
            recipe = catalog().get_recipe(recipe_id)
        except RecipeNotFound as exc:
            return _error(exc.message, 404)
        except Exception:
            logger.exception("Failed to fetch recipe %s", recipe_id)
            return _error("Failed to fetch recipe", 500)
        return jsonify(recipe.to_dict())

    @app.post("/api/recipes")
    def create_recipe() -> Tuple[Response, int]:
        try:
            recipe = catalog().create_recipe(request.get_json(silent=True))
        except RecipeValidationError as exc:
            return _error(exc.message, 400)
        except Exception:
            logger.exception("Failed to create recipe")
            return _error("Failed to create recipe", 500)
        return jsonify(recipe.to_dict()), 201

    @app.put("/api/recipes/<recipe_id>")
    def update_recipe(recipe_id: str) -> Response:
        try:
            recipe = catalog().update_recipe(recipe_id, request.get_json(silent=True))
        except RecipeNotFound as exc:
            return _error(exc.message, 404)
        except RecipeValidationError as exc:
            return _error(exc.message, 400)
        except Exception:
            logger.exception("Failed to update recipe %s", recipe_id)
            return _error("Failed to update recipe", 500)
        return jsonify(recipe.to_dict())

    @app.delete("/api/recipes/<recipe_id>")
    def delete_recipe(recipe_id: str) -> Response:
        try:
            removed = catalog().delete_recipe(recipe_id)
        except RecipeNotFound as exc:
            return _error(exc.message, 404)
        except Exception:
            logger.exception("Failed to delete recipe %s", recipe_id)
            return _error("Failed to delete recipe", 500)
        return jsonify({"message": "Recipe deleted successfully", "recipe": removed.to_dict()})

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException) -> Tuple[Response, int]:
        status = exc.code or 500
        if status == 404:
            return _error("Route not found", 404)
        return _error(exc.description or exc.name, status)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception) -> Tuple[Response, int]:
        logger.exception("Unhandled error while serving %s %s", request.method, request.path)
        return _error("Internal server error", 500)

    return app


def _error(message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"error": message}), status


def _configure_logging(level: str) -> None:
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(level)
    if package_logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)


__all__ = ["create_app", "Recipe", "RecipeCatalog", "Settings"]
