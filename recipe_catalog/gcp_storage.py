from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .config import CatalogConfig
from .errors import BackendUnavailable, NotFoundError
from .models import Recipe, RecipeChanges, RecipeDraft
from .storage import RecipeRepository

logger = logging.getLogger(__name__)

BACKEND_NAME = "Firestore"


@contextmanager
def _translate_errors(recipe_id: Optional[str] = None) -> Iterator[None]:
    try:
        yield
    except gcloud_exceptions.NotFound as exc:
        if recipe_id is None:
            raise BackendUnavailable(BACKEND_NAME, str(exc)) from exc
        raise NotFoundError(recipe_id) from exc
    except (
        gcloud_exceptions.GoogleAPIError,
        auth_exceptions.GoogleAuthError,
    ) as exc:
        raise BackendUnavailable(BACKEND_NAME, str(exc)) from exc


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a single Firestore collection."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name

        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)
        logger.info(f"Using Firestore collection '{collection_name}'")

    @classmethod
    def from_config(cls, config: CatalogConfig) -> "FirestoreRecipeStorage":
        """Build a storage instance from the catalog configuration."""

        return cls(project=config.gcp_project, collection_name=config.recipes_collection)

    def create_recipe(self, draft: RecipeDraft) -> Recipe:
        published_at = datetime.now(timezone.utc)
        doc = {
            "name": draft.name,
            "instructions": draft.instructions,
            "ingredients": list(draft.ingredients),
            "tags": list(draft.tags),
            "published_at": published_at,
        }

        with _translate_errors():
            doc_ref = self._collection.document()
            doc_ref.create(doc)

        return self._doc_to_recipe(doc_ref.id, doc)

    def get_recipe(self, recipe_id: str) -> Recipe:
        with _translate_errors(recipe_id):
            snapshot = self._collection.document(recipe_id).get()

        if not snapshot.exists:
            raise NotFoundError(recipe_id)

        return self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

    def list_recipes(self) -> List[Recipe]:
        query = self._collection.order_by("published_at", direction=firestore.Query.DESCENDING)
        return self._run(query)

    def search_recipes(self, tag: str) -> List[Recipe]:
        query = self._collection.where(filter=FieldFilter("tags", "array_contains", tag))
        recipes = self._run(query)
        # array_contains combined with order_by needs a composite index
        recipes.sort(key=lambda recipe: recipe.published_at, reverse=True)
        return recipes

    def update_recipe(self, recipe_id: str, changes: RecipeChanges) -> None:
        update_doc = changes.as_update()

        with _translate_errors(recipe_id):
            doc_ref = self._collection.document(recipe_id)
            if not update_doc:
                if not doc_ref.get().exists:
                    raise NotFoundError(recipe_id)
                return
            # update() fails with NotFound when the document is missing
            doc_ref.update(update_doc)

    def delete_recipe(self, recipe_id: str) -> None:
        with _translate_errors(recipe_id):
            doc_ref = self._collection.document(recipe_id)
            snapshot = doc_ref.get()

            if not snapshot.exists:
                raise NotFoundError(recipe_id)

            doc_ref.delete()

    def count_recipes(self) -> int:
        with _translate_errors():
            results = self._collection.count().get()
        return int(results[0][0].value) if results else 0

    def close(self) -> None:
        self._firestore_client.close()

    def _run(self, query) -> List[Recipe]:
        with _translate_errors():
            return [self._doc_to_recipe(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def _doc_to_recipe(self, doc_id: str, data: dict) -> Recipe:
        ingredients = data.get("ingredients")
        tags = data.get("tags")

        published_at = data.get("published_at")
        if not isinstance(published_at, datetime):
            published_at = datetime.fromtimestamp(0, tz=timezone.utc)

        return Recipe(
            id=doc_id,
            name=data.get("name", ""),
            instructions=data.get("instructions", ""),
            ingredients=list(ingredients) if isinstance(ingredients, list) else [],
            tags=list(tags) if isinstance(tags, list) else [],
            published_at=published_at,
        )


__all__ = ["FirestoreRecipeStorage"]
