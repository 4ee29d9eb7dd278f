"""Supabase access."""

from recipe_intake.db.client import get_service_client

__all__ = ["get_service_client"]
