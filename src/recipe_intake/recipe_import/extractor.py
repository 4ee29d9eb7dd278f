"""
Extraction orchestration for a single job.

Pipeline:
1. extracting - one JSON-mode completion over the normalized content
2. validating - repair or reject the returned JSON
3. generating_image - dish photo and alt text, both best-effort
4. saving - persist the recipe, then succeeded

Failures in steps 1, 2 and 4 end the job as failed with a readable message.
Failures in step 3 only leave image_url / image_alt_text unset.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from recipe_intake.config import settings
from recipe_intake.exceptions import ExtractionFailedError, InvalidTransitionError
from recipe_intake.jobs.models import ExtractionJob, JobStatus, transition
from recipe_intake.jobs.store import JobStore
from recipe_intake.llm.client import ModelClient
from recipe_intake.storage.base import ObjectStorage, RecipeRepository, sniff_image_type

from .models import ContentPart, InputKind, RecipeCandidate
from .normalizer import normalize_content
from .prompts import (
    build_alt_text_prompt,
    build_extraction_instruction,
    build_image_prompt,
    clean_alt_text,
)
from .validator import validate_extraction

logger = logging.getLogger(__name__)

# Optional enrichments that can be skipped without failing the job
IMAGE_ENRICHMENT = "image"
ALT_TEXT_ENRICHMENT = "alt_text"


@dataclass
class ExtractionOutcome:
    """Final job snapshot plus what the pipeline produced."""

    job: ExtractionJob
    candidate: RecipeCandidate | None = None
    degraded: list[str] = field(default_factory=list)

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded)


def build_request_parts(input_kind: InputKind | str, raw_content: str) -> list[ContentPart]:
    """
    Build the extraction request: the instruction followed by the content.

    Photos keep one image part per page, in order. Text is appended to the
    instruction as a single text part.
    """
    parts = normalize_content(input_kind, raw_content)
    if parts[0].type == "image_url":
        return [ContentPart.from_text(build_extraction_instruction()), *parts]
    return [ContentPart.from_text(build_extraction_instruction(parts[0].text))]


def describe_error(stage: str, error: Exception) -> str:
    """Human-readable failure message for a job."""
    if isinstance(error, ExtractionFailedError):
        return str(error)
    detail = str(error) or type(error).__name__
    return f"Failed to {stage}: {detail}"


class ExtractionOrchestrator:
    """
    Drives one job from pending to a terminal state.

    Every status change is written through the job store before the next
    external call starts, so pollers can follow progress.
    """

    def __init__(
        self,
        models: ModelClient,
        object_storage: ObjectStorage,
        recipes: RecipeRepository,
        job_store: JobStore,
        *,
        image_size: str | None = None,
    ):
        self.models = models
        self.object_storage = object_storage
        self.recipes = recipes
        self.job_store = job_store
        self.image_size = image_size or settings.image_size

    async def _advance(self, job: ExtractionJob, target: JobStatus, **fields) -> ExtractionJob:
        job = transition(job, target, **fields)
        await asyncio.to_thread(self.job_store.save, job)
        logger.info(f"Job {job.id} -> {job.status.value}")
        return job

    async def _fail(self, job: ExtractionJob, message: str) -> ExtractionOutcome:
        logger.warning(f"Job {job.id} failed during {job.status.value}: {message}")
        return ExtractionOutcome(job=await self._advance(job, JobStatus.FAILED, error_message=message))

    async def run(self, job: ExtractionJob) -> ExtractionOutcome:
        """
        Run the full pipeline for a pending job.

        Returns:
            ExtractionOutcome with the terminal job snapshot

        Raises:
            InvalidTransitionError: If the job is not pending
        """
        if job.status != JobStatus.PENDING:
            raise InvalidTransitionError(job.status.value, JobStatus.EXTRACTING.value)

        job = await self._advance(job, JobStatus.EXTRACTING)
        try:
            raw_json = await self.extract(job)
        except Exception as e:
            return await self._fail(job, describe_error("extract recipe", e))

        job = await self._advance(job, JobStatus.VALIDATING)
        try:
            candidate = validate_extraction(raw_json)
        except ExtractionFailedError as e:
            return await self._fail(job, describe_error("validate recipe", e))

        job = await self._advance(job, JobStatus.GENERATING_IMAGE)
        candidate, degraded = await self.enrich(candidate)

        job = await self._advance(job, JobStatus.SAVING)
        try:
            recipe_id = await self.recipes.save(candidate, job.owner_id)
        except Exception as e:
            logger.exception(f"Failed to save recipe for job {job.id}")
            return await self._fail(job, describe_error("save recipe", e))

        job = await self._advance(job, JobStatus.SUCCEEDED, result_recipe_id=recipe_id)
        if degraded:
            logger.warning(f"Job {job.id} succeeded without: {', '.join(degraded)}")
        return ExtractionOutcome(job=job, candidate=candidate, degraded=degraded)

    async def extract(self, job: ExtractionJob) -> str:
        """Submit the job content to the completion model and return the JSON text."""
        parts = build_request_parts(job.input_kind, job.raw_content)
        logger.info(f"Extracting recipe for job {job.id} ({job.input_kind.value}, {len(parts)} parts)")
        return await self.models.complete_json(parts)

    async def enrich(self, candidate: RecipeCandidate) -> tuple[RecipeCandidate, list[str]]:
        """
        Add a generated photo and its alt text.

        Never raises: each failed enrichment is logged and reported in the
        returned list instead.
        """
        degraded: list[str] = []
        updates: dict[str, str] = {}
        image: bytes | None = None

        try:
            image = await self.models.generate_image(build_image_prompt(candidate.name), self.image_size)
            updates["image_url"] = await self.object_storage.upload(image, sniff_image_type(image))
        except Exception as e:
            logger.warning(f"Image generation failed for '{candidate.name}': {e}")
            degraded.append(IMAGE_ENRICHMENT)

        if "image_url" in updates and image is not None:
            try:
                alt_text = clean_alt_text(
                    await self.models.describe_image(image, build_alt_text_prompt(candidate.name))
                )
                if alt_text:
                    updates["image_alt_text"] = alt_text
                else:
                    degraded.append(ALT_TEXT_ENRICHMENT)
            except Exception as e:
                logger.warning(f"Alt text generation failed for '{candidate.name}': {e}")
                degraded.append(ALT_TEXT_ENRICHMENT)
        else:
            degraded.append(ALT_TEXT_ENRICHMENT)

        return candidate.model_copy(update=updates), degraded
