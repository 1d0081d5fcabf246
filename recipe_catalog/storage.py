from __future__ import annotations

from typing import List, Optional, Protocol

from .models import Recipe, RecipeChanges, RecipeDraft


class RecipeRepository(Protocol):
    """Protocol describing the durable recipe store.

    Implementations raise :class:`~recipe_catalog.errors.NotFoundError` for a
    missing record and :class:`~recipe_catalog.errors.BackendUnavailable` for
    any other backend failure.
    """

    def create_recipe(self, draft: RecipeDraft) -> Recipe:
        """Persist a new recipe, assigning its id and publication time."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe."""

    def list_recipes(self) -> List[Recipe]:
        """Return every stored recipe ordered newest first."""

    def search_recipes(self, tag: str) -> List[Recipe]:
        """Return the recipes whose tags contain ``tag``."""

    def update_recipe(self, recipe_id: str, changes: RecipeChanges) -> None:
        """Write the provided fields of an existing recipe."""

    def delete_recipe(self, recipe_id: str) -> None:
        """Remove a recipe."""

    def count_recipes(self) -> int:
        """Return the number of stored recipes."""

    def close(self) -> None:
        """Release the connection to the store."""


class RecipeCache(Protocol):
    """Protocol describing the key-value cache placed in front of the store."""

    def get(self, key: str) -> Optional[str]:
        """Return the cached value or ``None`` when the key is missing."""

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""

    def delete(self, *keys: str) -> int:
        """Remove the given keys and return how many existed."""

    def close(self) -> None:
        """Release the connection to the cache."""


__all__ = ["RecipeRepository", "RecipeCache"]
