import logging
from typing import Optional, Tuple

import click
from flask import Flask, Response, jsonify, request

from .cache import RedisRecipeCache
from .config import CatalogConfig
from .errors import BackendUnavailable, CatalogError, NotFoundError, ValidationError
from .models import Recipe, RecipeChanges, RecipeDraft
from .seed import load_recipes_from_file, populate_recipes
from .service import CachedRecipeService

try:
    from .gcp_storage import FirestoreRecipeStorage
except ImportError:  # pragma: no cover - allows running tests without optional deps
    FirestoreRecipeStorage = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def create_app(
    service: Optional[CachedRecipeService] = None,
    config: Optional[CatalogConfig] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    service:
        Optional cache-aside recipe service. When ``None`` the application
        connects to Firestore and Redis using ``config``.
    config:
        Optional runtime settings. Defaults to :meth:`CatalogConfig.from_env`.
    """

    config = config or CatalogConfig.from_env()

    app = Flask(__name__)
    app.secret_key = config.secret_key

    if service is None:
        service = build_service(config)
    app.config["RECIPE_SERVICE"] = service

    def recipe_service() -> CachedRecipeService:
        return app.config["RECIPE_SERVICE"]

    @app.post("/recipes")
    def create_recipe() -> Response:
        draft = RecipeDraft.from_payload(request.get_json(silent=True))
        recipe = recipe_service().create_recipe(draft)
        return jsonify(recipe.to_dict())

    @app.get("/recipes")
    def list_recipes() -> Response:
        recipes = recipe_service().list_recipes()
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/recipes/search")
    def search_recipes() -> Response:
        tag = request.args.get("tag", "").strip()
        if not tag:
            raise ValidationError("Query parameter 'tag' is required.")
        recipes = recipe_service().search_recipes(tag)
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/recipes/<recipe_id>")
    def get_recipe(recipe_id: str) -> Response:
        return jsonify(recipe_service().get_recipe(recipe_id).to_dict())

    @app.put("/recipes/<recipe_id>")
    def update_recipe(recipe_id: str) -> Response:
        changes = RecipeChanges.from_payload(request.get_json(silent=True))
        recipe_service().update_recipe(recipe_id, changes)
        return jsonify({"message": "Recipe has been updated"})

    @app.delete("/recipes/<recipe_id>")
    def delete_recipe(recipe_id: str) -> Response:
        recipe_service().delete_recipe(recipe_id)
        return jsonify({"message": "Recipe has been deleted"})

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError) -> Tuple[Response, int]:
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc: NotFoundError) -> Tuple[Response, int]:
        return jsonify({"error": "Recipe not found"}), 404

    @app.errorhandler(BackendUnavailable)
    def handle_backend_unavailable(exc: BackendUnavailable) -> Tuple[Response, int]:
        logger.error(f"{request.method} {request.path} failed: {exc}")
        return jsonify({"error": str(exc)}), 500

    @app.cli.command("seed")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def seed_command(path: str) -> None:
        """Load recipes from a JSON file into an empty store."""

        try:
            drafts = load_recipes_from_file(path)
            inserted = populate_recipes(recipe_service(), drafts)
        except CatalogError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Inserted {inserted} recipes.")

    return app


def build_service(config: CatalogConfig) -> CachedRecipeService:
    """Connect to Firestore and Redis and wrap them in a cache-aside service."""

    if FirestoreRecipeStorage is None:
        raise RuntimeError(
            "google-cloud-firestore is not installed. Install it or pass an "
            "explicit service to create_app."
        )
    repository = FirestoreRecipeStorage.from_config(config)
    cache = RedisRecipeCache.from_config(config)
    return CachedRecipeService(repository, cache, ttl_seconds=config.cache_ttl_seconds)


__all__ = ["create_app", "build_service", "CachedRecipeService", "Recipe"]
