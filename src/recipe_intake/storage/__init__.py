"""Object storage and recipe persistence collaborators."""

from .base import (
    InMemoryObjectStorage,
    InMemoryRecipeRepository,
    ObjectStorage,
    RecipeRepository,
)

__all__ = [
    "ObjectStorage",
    "RecipeRepository",
    "InMemoryObjectStorage",
    "InMemoryRecipeRepository",
]
