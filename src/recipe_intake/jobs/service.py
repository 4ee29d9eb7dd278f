"""
Job service - the surface the rest of the application talks to.

create_job() validates input and checks the owner's quota before any job
row exists; rejected requests leave no trace. run_job() drives a job to a
terminal state; submit() does both and schedules the run as a background
task so it completes even if the client stops polling.

There is no cancellation: a created job always runs to succeeded or failed.
"""

import asyncio
import threading
import logging

from recipe_intake.config import settings
from recipe_intake.exceptions import JobNotFoundError, RateLimitedError
from recipe_intake.recipe_import.extractor import (
    ExtractionOrchestrator,
    ExtractionOutcome,
    describe_error,
)
from recipe_intake.recipe_import.models import InputKind
from recipe_intake.recipe_import.normalizer import normalize_content, parse_input_kind

from .models import ExtractionJob, JobStatus, JobStatusView, can_transition, transition
from .rate_limit import MovingWindowQuota, QuotaTracker
from .store import JobStore

logger = logging.getLogger(__name__)


class JobService:
    """Creates, runs and reports on extraction jobs."""

    def __init__(
        self,
        store: JobStore,
        orchestrator: ExtractionOrchestrator,
        quota: QuotaTracker | None = None,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.quota = quota or MovingWindowQuota(
            max_requests=settings.rate_limit_max_jobs,
            window_seconds=settings.rate_limit_window_seconds,
            storage_uri=settings.rate_limit_storage_uri,
        )
        # Held from the quota check until the quota is consumed
        self._create_lock = threading.Lock()
        # Strong references to running tasks so they are not garbage collected
        self._tasks: dict[str, asyncio.Task] = {}

    def create_job(self, owner_id: str, input_kind: InputKind | str, raw_content: str) -> str:
        """
        Create a pending job.

        Quota is consumed only once the job row exists, so a failed insert
        costs the owner nothing.

        Returns:
            The new job id

        Raises:
            InvalidInputError: Empty content or unknown input kind
            RateLimitedError: The owner exceeded the creation quota
            PersistenceError: The job could not be stored
        """
        kind = parse_input_kind(input_kind)
        normalize_content(kind, raw_content)

        with self._create_lock:
            decision = self.quota.check(owner_id)
            if not decision.allowed:
                logger.info(f"Rate limited job creation for user {owner_id}")
                raise RateLimitedError(owner_id, decision.retry_after_seconds)

            job = self.store.add(ExtractionJob(owner_id=owner_id, input_kind=kind, raw_content=raw_content))
            self.quota.try_acquire(owner_id)

        logger.info(f"Created job {job.id} for user {owner_id} ({kind.value})")
        return job.id

    async def run_job(self, job_id: str) -> ExtractionOutcome:
        """
        Drive a pending job to a terminal state.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        job = await asyncio.to_thread(self.store.get, job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return await self.orchestrator.run(job)

    async def _run_background(self, job_id: str) -> None:
        try:
            await self.run_job(job_id)
        except Exception as e:
            logger.exception(f"Background extraction failed for job {job_id}")
            await asyncio.to_thread(self._fail_unfinished, job_id, describe_error("process recipe", e))
        finally:
            self._tasks.pop(job_id, None)

    def _fail_unfinished(self, job_id: str, message: str) -> None:
        """Move a job left mid-pipeline by an unexpected error to failed."""
        try:
            job = self.store.get(job_id)
            if job is None or job.is_terminal or not can_transition(job.status, JobStatus.FAILED):
                return
            self.store.save(transition(job, JobStatus.FAILED, error_message=message))
        except Exception as e:
            logger.error(f"Failed to mark job {job_id} as failed: {e}")

    async def submit(self, owner_id: str, input_kind: InputKind | str, raw_content: str) -> str:
        """
        Create a job and start it in the background on the running event loop.

        Store calls run in a worker thread so a slow database does not block
        the loop.

        Returns:
            The new job id
        """
        job_id = await asyncio.to_thread(self.create_job, owner_id, input_kind, raw_content)
        self._tasks[job_id] = asyncio.create_task(self._run_background(job_id))
        return job_id

    async def wait_for(self, job_id: str) -> None:
        """Wait until a job started by submit() has finished running."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.shield(task)

    def get_job_status(self, job_id: str) -> JobStatusView | None:
        job = self.store.get(job_id)
        if job is None:
            return None
        return JobStatusView.from_job(job)

    def get_job(self, job_id: str) -> ExtractionJob | None:
        return self.store.get(job_id)

    def list_active_jobs(self, owner_id: str) -> list[ExtractionJob]:
        return self.store.list_active(owner_id)


def build_job_service() -> JobService:
    """
    Build a JobService from settings.

    Uses Supabase for jobs, images and recipes when configured, otherwise
    in-memory stores (local development).
    """
    from recipe_intake.llm.client import OpenAIModelClient
    from recipe_intake.storage.base import InMemoryObjectStorage, InMemoryRecipeRepository

    from .store import InMemoryJobStore, SupabaseJobStore

    if settings.supabase_configured:
        from recipe_intake.storage.supabase import SupabaseObjectStorage, SupabaseRecipeRepository

        store = SupabaseJobStore()
        object_storage = SupabaseObjectStorage()
        recipes = SupabaseRecipeRepository()
    else:
        logger.info("Supabase not configured, using in-memory stores")
        store = InMemoryJobStore()
        object_storage = InMemoryObjectStorage()
        recipes = InMemoryRecipeRepository()

    orchestrator = ExtractionOrchestrator(
        models=OpenAIModelClient(),
        object_storage=object_storage,
        recipes=recipes,
        job_store=store,
    )
    return JobService(store=store, orchestrator=orchestrator)
