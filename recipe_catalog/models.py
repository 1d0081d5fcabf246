from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import ValidationError


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    name: str
    instructions: str
    ingredients: List[str]
    tags: List[str]
    published_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tags": list(self.tags),
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
            "publishedAt": self.published_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            instructions=data.get("instructions", ""),
            ingredients=list(data.get("ingredients") or []),
            tags=list(data.get("tags") or []),
            published_at=datetime.fromisoformat(data["publishedAt"]),
        )


@dataclass
class RecipeDraft:
    """Mutable fields of a recipe that has not been stored yet."""

    name: str
    instructions: str = ""
    ingredients: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "RecipeDraft":
        changes = RecipeChanges.from_payload(payload)
        if not changes.name:
            raise ValidationError("Field 'name' is required.")
        return cls(
            name=changes.name,
            instructions=changes.instructions or "",
            ingredients=changes.ingredients or [],
            tags=changes.tags or [],
        )


@dataclass
class RecipeChanges:
    """Partial update of a recipe. Fields left as ``None`` are not written."""

    name: Optional[str] = None
    instructions: Optional[str] = None
    ingredients: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RecipeChanges":
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object.")

        allowed = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - allowed)
        if unknown:
            raise ValidationError(f"Unsupported fields: {', '.join(unknown)}.")

        name = payload.get("name")
        if name is not None:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("Field 'name' must be a non-empty string.")
            name = name.strip()

        instructions = payload.get("instructions")
        if instructions is not None and not isinstance(instructions, str):
            raise ValidationError("Field 'instructions' must be a string.")

        return cls(
            name=name,
            instructions=instructions,
            ingredients=_string_list(payload, "ingredients"),
            tags=_unique(_string_list(payload, "tags")),
        )

    def as_update(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def _string_list(payload: Dict[str, Any], key: str) -> Optional[List[str]]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"Field '{key}' must be a list of strings.")
    return [item.strip() for item in value if item.strip()]


def _unique(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    # tags behave like a set but keep the caller's order
    return list(dict.fromkeys(values))


__all__ = ["Recipe", "RecipeDraft", "RecipeChanges"]
