"""
Job persistence.

Single-owner module for job rows: the orchestrator writes through save(),
pollers only read. Stored jobs are immutable snapshots, so a poll always sees
either the previous or the next complete state of a job.
"""

import logging
from typing import Protocol, runtime_checkable

from supabase import Client

from recipe_intake.config import settings
from recipe_intake.db.client import get_service_client
from recipe_intake.exceptions import PersistenceError

from .models import TERMINAL_STATUSES, ExtractionJob, JobStatus

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = [status.value for status in JobStatus if status not in TERMINAL_STATUSES]


@runtime_checkable
class JobStore(Protocol):
    """Persistent store of extraction jobs."""

    def add(self, job: ExtractionJob) -> ExtractionJob:
        """Insert a new job and return it as stored."""
        ...

    def save(self, job: ExtractionJob) -> None:
        """Persist the latest snapshot of an existing job. Raises PersistenceError on failure."""
        ...

    def get(self, job_id: str) -> ExtractionJob | None:
        ...

    def list_active(self, owner_id: str) -> list[ExtractionJob]:
        """Non-terminal jobs for an owner, newest first."""
        ...


class InMemoryJobStore:
    """JobStore holding snapshots in a dict."""

    def __init__(self) -> None:
        self._jobs: dict[str, ExtractionJob] = {}

    def add(self, job: ExtractionJob) -> ExtractionJob:
        if job.id in self._jobs:
            raise PersistenceError(f"Job already exists: {job.id}")
        self._jobs[job.id] = job
        return job

    def save(self, job: ExtractionJob) -> None:
        if job.id not in self._jobs:
            raise PersistenceError(f"Unknown job: {job.id}")
        self._jobs[job.id] = job

    def get(self, job_id: str) -> ExtractionJob | None:
        return self._jobs.get(job_id)

    def list_active(self, owner_id: str) -> list[ExtractionJob]:
        jobs = [
            job for job in self._jobs.values()
            if job.owner_id == owner_id and not job.is_terminal
        ]
        return sorted(jobs, key=lambda job: job.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._jobs)


class SupabaseJobStore:
    """JobStore backed by the extraction_jobs table."""

    def __init__(self, client: Client | None = None, table: str | None = None):
        self._client = client
        self.table = table or settings.supabase_jobs_table

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_service_client()
        return self._client

    def add(self, job: ExtractionJob) -> ExtractionJob:
        result = self.client.table(self.table).insert(job.model_dump(mode="json")).execute()
        if not result.data:
            raise PersistenceError(f"Failed to create job for user {job.owner_id}")
        return ExtractionJob(**result.data[0])

    def save(self, job: ExtractionJob) -> None:
        try:
            self.client.table(self.table).update(
                {
                    "status": job.status.value,
                    "result_recipe_id": job.result_recipe_id,
                    "error_message": job.error_message,
                    "completed_at": job.completed_at.isoformat() if job.completed_at else None,
                }
            ).eq("id", job.id).execute()
        except Exception as e:
            logger.error(f"Failed to save job {job.id} ({job.status.value}): {e}")
            raise PersistenceError(f"Failed to save job {job.id}") from e

    def get(self, job_id: str) -> ExtractionJob | None:
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .eq("id", job_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get job {job_id}: {e}")
            return None
        if result is None or not result.data:
            return None
        return ExtractionJob(**result.data)

    def list_active(self, owner_id: str) -> list[ExtractionJob]:
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .eq("owner_id", owner_id)
                .in_("status", ACTIVE_STATUSES)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list active jobs for user {owner_id}: {e}")
            return []
        return [ExtractionJob(**row) for row in result.data or []]
