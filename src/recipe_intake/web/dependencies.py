"""Shared FastAPI dependencies."""

from functools import lru_cache

from recipe_intake.jobs.service import JobService, build_job_service


@lru_cache
def get_job_service() -> JobService:
    """Process-wide JobService (overridden in tests)."""
    return build_job_service()
