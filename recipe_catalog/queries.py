from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ALL_KEY = "all"
ITEM_PREFIX = "item:"
SEARCH_PREFIX = "search:"


@dataclass(frozen=True)
class RecipeQuery:
    """A supported read against the recipe store.

    Build instances through :meth:`all`, :meth:`by_id` or :meth:`by_tag`. Each
    shape owns its cache key, so equal queries always share a cache entry and
    different result sets never do.
    """

    kind: str
    value: Optional[str] = None

    @classmethod
    def all(cls) -> "RecipeQuery":
        return cls("all")

    @classmethod
    def by_id(cls, recipe_id: str) -> "RecipeQuery":
        return cls("id", recipe_id)

    @classmethod
    def by_tag(cls, tag: str) -> "RecipeQuery":
        return cls("tag", tag)

    @property
    def cache_key(self) -> str:
        if self.kind == "all":
            return ALL_KEY
        if self.kind == "id":
            return f"{ITEM_PREFIX}{self.value}"
        if self.kind == "tag":
            return f"{SEARCH_PREFIX}{self.value}"
        raise ValueError(f"Unknown query kind: {self.kind!r}")


__all__ = ["RecipeQuery", "ALL_KEY", "ITEM_PREFIX", "SEARCH_PREFIX"]
