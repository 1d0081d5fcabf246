from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence, Union

from .errors import ValidationError
from .models import RecipeDraft
from .service import CachedRecipeService

logger = logging.getLogger(__name__)


def load_recipes_from_file(path: Union[str, Path]) -> List[RecipeDraft]:
    """Read a JSON array of recipe objects into drafts.

    Store-assigned fields (``id``, ``publishedAt``) present in the file are
    ignored, so exports of the API can be fed back in.
    """

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Failed to parse JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValidationError(f"Expected a JSON array of recipes in {path}.")

    drafts = []
    for index, item in enumerate(raw):
        if isinstance(item, dict):
            item = {key: value for key, value in item.items() if key not in ("id", "publishedAt")}
        try:
            drafts.append(RecipeDraft.from_payload(item))
        except ValidationError as exc:
            raise ValidationError(f"Recipe #{index} in {path}: {exc}") from exc
    return drafts


def populate_recipes(service: CachedRecipeService, drafts: Sequence[RecipeDraft]) -> int:
    """Insert ``drafts`` when the store is empty and return how many were added."""

    count = service.count_recipes()
    if count:
        logger.info(f"Recipes collection already contains {count} recipes, skipping insertion.")
        return 0

    for draft in drafts:
        service.create_recipe(draft)

    logger.info(f"Inserted {len(drafts)} recipes")
    return len(drafts)


__all__ = ["load_recipes_from_file", "populate_recipes"]
