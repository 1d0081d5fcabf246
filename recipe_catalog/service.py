"""Cache-aside access to the recipe store.

Reads consult the cache first and fill it from the store on a miss. Writes go
to the store first and only then invalidate the cache entries they may have
made stale. Invalidation never precedes the store commit, so the worst case
is a fill racing a write, which the TTL bounds.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, TypeVar

from .config import DEFAULT_CACHE_TTL_SECONDS
from .errors import BackendUnavailable
from .models import Recipe, RecipeChanges, RecipeDraft
from .queries import RecipeQuery
from .storage import RecipeCache, RecipeRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CachedRecipeService:
    """Mediates every recipe read and write between the cache and the store."""

    def __init__(
        self,
        repository: RecipeRepository,
        cache: RecipeCache,
        *,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._repository = repository
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    # Reads

    def get_recipe(self, recipe_id: str) -> Recipe:
        query = RecipeQuery.by_id(recipe_id)
        return self._read(
            query,
            load=lambda: self._repository.get_recipe(recipe_id),
            encode=lambda recipe: recipe.to_dict(),
            decode=Recipe.from_dict,
        )

    def list_recipes(self) -> List[Recipe]:
        return self._read(
            RecipeQuery.all(),
            load=self._repository.list_recipes,
            encode=_encode_list,
            decode=_decode_list,
        )

    def search_recipes(self, tag: str) -> List[Recipe]:
        return self._read(
            RecipeQuery.by_tag(tag),
            load=lambda: self._repository.search_recipes(tag),
            encode=_encode_list,
            decode=_decode_list,
        )

    def count_recipes(self) -> int:
        return self._repository.count_recipes()

    # Writes

    def create_recipe(self, draft: RecipeDraft) -> Recipe:
        recipe = self._repository.create_recipe(draft)
        self._invalidate(RecipeQuery.all())
        return recipe

    def update_recipe(self, recipe_id: str, changes: RecipeChanges) -> None:
        self._repository.update_recipe(recipe_id, changes)
        self._invalidate(RecipeQuery.all(), RecipeQuery.by_id(recipe_id))

    def delete_recipe(self, recipe_id: str) -> None:
        self._repository.delete_recipe(recipe_id)
        self._invalidate(RecipeQuery.all(), RecipeQuery.by_id(recipe_id))

    def close(self) -> None:
        self._cache.close()
        self._repository.close()

    def _read(
        self,
        query: RecipeQuery,
        *,
        load: Callable[[], T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> T:
        key = query.cache_key

        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"Fetching '{key}' from cache")
            try:
                return decode(json.loads(cached))
            except (ValueError, KeyError, TypeError) as exc:
                raise BackendUnavailable("Redis", f"unreadable entry for '{key}'") from exc

        logger.info(f"Fetching '{key}' from store")
        result = load()
        self._cache.set(key, json.dumps(encode(result)), self._ttl_seconds)
        return result

    def _invalidate(self, *queries: RecipeQuery) -> None:
        keys = [query.cache_key for query in queries]
        try:
            self._cache.delete(*keys)
        except BackendUnavailable as exc:
            # The store already holds the new state; the TTL bounds how long
            # the stale entries can live.
            logger.warning(f"Cache invalidation failed for {keys}: {exc}")
            return
        logger.info(f"Cache invalidated: removed {keys}")


def _encode_list(recipes: List[Recipe]) -> List[dict]:
    return [recipe.to_dict() for recipe in recipes]


def _decode_list(data: Any) -> List[Recipe]:
    return [Recipe.from_dict(item) for item in data]


__all__ = ["CachedRecipeService"]
