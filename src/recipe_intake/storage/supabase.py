"""Supabase-backed storage collaborators."""

import asyncio
import logging

from supabase import Client

from recipe_intake.config import settings
from recipe_intake.db.client import get_service_client
from recipe_intake.exceptions import PersistenceError
from recipe_intake.recipe_import.models import RecipeCandidate

from .base import image_object_name, recipe_record

logger = logging.getLogger(__name__)

# Generated images never change once written
CACHE_CONTROL_SECONDS = "31536000"


class SupabaseObjectStorage:
    """Uploads images to a public Supabase storage bucket."""

    def __init__(self, client: Client | None = None, bucket: str | None = None):
        self._client = client
        self.bucket = bucket or settings.supabase_recipe_bucket

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_service_client()
        return self._client

    def _upload_sync(self, data: bytes, content_type: str) -> str:
        path = image_object_name(content_type)
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path,
            data,
            file_options={
                "content-type": content_type,
                "cache-control": CACHE_CONTROL_SECONDS,
                "upsert": "false",
            },
        )
        return bucket.get_public_url(path)

    async def upload(self, data: bytes, content_type: str) -> str:
        url = await asyncio.to_thread(self._upload_sync, data, content_type)
        logger.info(f"Uploaded {len(data)} bytes to bucket {self.bucket}")
        return url


class SupabaseRecipeRepository:
    """Inserts accepted recipes into the recipes table."""

    def __init__(self, client: Client | None = None, table: str | None = None):
        self._client = client
        self.table = table or settings.supabase_recipes_table

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_service_client()
        return self._client

    def _save_sync(self, candidate: RecipeCandidate, owner_id: str) -> str:
        result = self.client.table(self.table).insert(recipe_record(candidate, owner_id)).execute()
        if not result.data:
            raise PersistenceError("Failed to create recipe")
        return str(result.data[0]["id"])

    async def save(self, candidate: RecipeCandidate, owner_id: str) -> str:
        return await asyncio.to_thread(self._save_sync, candidate, owner_id)
