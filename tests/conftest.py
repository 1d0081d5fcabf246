from __future__ import annotations

from pathlib import Path
import sys
import uuid
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipe_catalog.errors import BackendUnavailable, NotFoundError
from recipe_catalog.models import Recipe


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryRecipeStorage:
    """Simple storage backend used for tests. Records every call it serves."""

    def __init__(self) -> None:
        self._recipes: dict[str, Recipe] = {}
        self._created = 0
        self.calls: list[str] = []
        self.failure: Exception | None = None
        self.closed = False

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.failure is not None:
            raise self.failure

    def create_recipe(self, draft) -> Recipe:
        self._enter("create")
        self._created += 1
        recipe = Recipe(
            id=uuid.uuid4().hex,
            name=draft.name,
            instructions=draft.instructions,
            ingredients=list(draft.ingredients),
            tags=list(draft.tags),
            published_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=self._created),
        )
        self._recipes[recipe.id] = recipe
        return _copy(recipe)

    def get_recipe(self, recipe_id: str) -> Recipe:
        self._enter("get")
        try:
            return _copy(self._recipes[recipe_id])
        except KeyError:
            raise NotFoundError(recipe_id) from None

    def list_recipes(self):
        self._enter("list")
        return [_copy(recipe) for recipe in self._sorted()]

    def search_recipes(self, tag: str):
        self._enter("search")
        return [_copy(recipe) for recipe in self._sorted() if tag in recipe.tags]

    def update_recipe(self, recipe_id: str, changes) -> None:
        self._enter("update")
        if recipe_id not in self._recipes:
            raise NotFoundError(recipe_id)
        recipe = self._recipes[recipe_id]
        for name, value in changes.as_update().items():
            setattr(recipe, name, value)

    def delete_recipe(self, recipe_id: str) -> None:
        self._enter("delete")
        if self._recipes.pop(recipe_id, None) is None:
            raise NotFoundError(recipe_id)

    def count_recipes(self) -> int:
        self._enter("count")
        return len(self._recipes)

    def close(self) -> None:
        self.closed = True

    def _sorted(self):
        return sorted(self._recipes.values(), key=lambda recipe: recipe.published_at, reverse=True)


class InMemoryCache:
    """Key-value cache with per-key expiry driven by an injectable clock."""

    def __init__(self, clock) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self.deleted: list[tuple[str, ...]] = []
        self.fail_reads = False
        self.fail_deletes = False
        self.closed = False

    def get(self, key: str):
        if self.fail_reads:
            raise BackendUnavailable("Redis", "connection refused")
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def delete(self, *keys: str) -> int:
        if self.fail_deletes:
            raise BackendUnavailable("Redis", "connection refused")
        self.deleted.append(keys)
        return sum(1 for key in keys if self._entries.pop(key, None) is not None)

    def keys(self) -> set[str]:
        return set(self._entries)

    def close(self) -> None:
        self.closed = True


def _copy(recipe: Recipe) -> Recipe:
    return Recipe.from_dict(recipe.to_dict())


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return InMemoryRecipeStorage()


@pytest.fixture
def cache(clock):
    return InMemoryCache(clock)


@pytest.fixture
def service(storage, cache):
    from recipe_catalog.service import CachedRecipeService

    return CachedRecipeService(storage, cache)
