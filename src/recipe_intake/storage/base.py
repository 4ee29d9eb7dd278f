"""
Storage collaborators: object storage for generated images and recipe
persistence.

The Protocols are the narrow contracts the pipeline depends on. The
in-memory implementations back the CLI and the tests.
"""

import uuid
from typing import Any, Protocol, runtime_checkable

from recipe_intake.recipe_import.models import RecipeCandidate

CONTENT_TYPE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


def sniff_image_type(data: bytes, default: str = "image/png") -> str:
    """Detect the content type of image bytes from their signature."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return default


def image_object_name(content_type: str, prefix: str = "recipe-images") -> str:
    """Unique object name for a stored image, e.g. recipe-images/<uuid>.png"""
    extension = CONTENT_TYPE_EXTENSIONS.get(content_type, "bin")
    return f"{prefix}/{uuid.uuid4()}.{extension}"


def recipe_record(candidate: RecipeCandidate, owner_id: str) -> dict[str, Any]:
    """Row data for a persisted recipe."""
    return {
        "user_id": owner_id,
        **candidate.model_dump(mode="json"),
    }


@runtime_checkable
class ObjectStorage(Protocol):
    """Stores bytes and returns a stable reference usable as an image URL."""

    async def upload(self, data: bytes, content_type: str) -> str:
        ...


@runtime_checkable
class RecipeRepository(Protocol):
    """Persists accepted recipe candidates."""

    async def save(self, candidate: RecipeCandidate, owner_id: str) -> str:
        """Persist the candidate and return the new recipe id."""
        ...


class InMemoryObjectStorage:
    """ObjectStorage keeping objects in a dict, served under /storage/."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def upload(self, data: bytes, content_type: str) -> str:
        name = image_object_name(content_type)
        self.objects[name] = (data, content_type)
        return f"/storage/{name}"


class InMemoryRecipeRepository:
    """RecipeRepository keeping recipe rows in a dict keyed by id."""

    def __init__(self) -> None:
        self.recipes: dict[str, dict[str, Any]] = {}

    async def save(self, candidate: RecipeCandidate, owner_id: str) -> str:
        recipe_id = str(uuid.uuid4())
        self.recipes[recipe_id] = {"id": recipe_id, **recipe_record(candidate, owner_id)}
        return recipe_id
