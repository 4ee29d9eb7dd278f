"""
Recipe Intake - Configuration and settings.

All settings are read from the environment (or a local .env file).
Only OPENAI_API_KEY is required; Supabase is optional and the in-memory
collaborators are used when it is not configured.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the extraction pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str
    openai_timeout_seconds: float = 60.0
    extraction_model: str = "gpt-4o"
    vision_model: str = "gpt-4o"
    image_model: str = "gpt-image-1"
    image_size: str = "1024x1024"

    # Supabase (optional)
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    supabase_recipe_bucket: str = "recipe-images"
    supabase_jobs_table: str = "extraction_jobs"
    supabase_recipes_table: str = "recipes"

    # Job creation quota, per owner
    rate_limit_max_jobs: int = 10
    rate_limit_window_seconds: int = 15 * 60
    # `limits` storage URI; use a shared backend (redis://...) with several workers
    rate_limit_storage_uri: str = "memory://"

    # Quantity scaling
    unit_aware_scaling: bool = True

    # Application
    intake_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # INTAKE_LOG_PROMPTS=1 - log model calls to local files (dev only)
    intake_log_prompts: bool = False

    @property
    def is_development(self) -> bool:
        return self.intake_env == "development"

    @property
    def is_production(self) -> bool:
        return self.intake_env == "production"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
