class CatalogError(Exception):
    """Base class for errors raised by the recipe catalog."""


class ValidationError(CatalogError):
    """The request payload could not be turned into recipe fields."""


class NotFoundError(CatalogError):
    """The store holds no recipe with the requested identifier."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe '{recipe_id}' does not exist.")
        self.recipe_id = recipe_id


class BackendUnavailable(CatalogError):
    """A store or cache operation failed for a reason other than a missing record."""

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(f"{backend} unavailable: {message}")
        self.backend = backend


__all__ = ["CatalogError", "ValidationError", "NotFoundError", "BackendUnavailable"]
