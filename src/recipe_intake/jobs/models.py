"""
Extraction job model and state machine.

A job moves strictly forward:

    pending -> extracting -> validating -> generating_image -> saving -> succeeded
                   |             |                              |
                   +-------------+---------> failed <-----------+

The image stage has no edge to failed: a missing photo or alt text only
degrades the result. Terminal jobs are immutable. transition() is the only
way to derive a new job state and always returns a new snapshot.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from recipe_intake.exceptions import InvalidTransitionError
from recipe_intake.recipe_import.models import InputKind


class JobStatus(str, Enum):
    """Lifecycle status of an extraction job."""

    PENDING = "pending"
    EXTRACTING = "extracting"
    VALIDATING = "validating"
    GENERATING_IMAGE = "generating_image"
    SAVING = "saving"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED})

ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.EXTRACTING}),
    JobStatus.EXTRACTING: frozenset({JobStatus.VALIDATING, JobStatus.FAILED}),
    JobStatus.VALIDATING: frozenset({JobStatus.GENERATING_IMAGE, JobStatus.FAILED}),
    JobStatus.GENERATING_IMAGE: frozenset({JobStatus.SAVING}),
    JobStatus.SAVING: frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED}),
    JobStatus.SUCCEEDED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ExtractionJob(BaseModel):
    """One tracked unit of extraction work."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    input_kind: InputKind
    raw_content: str
    status: JobStatus = JobStatus.PENDING
    result_recipe_id: str | None = None
    error_message: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    completed_at: datetime | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "ExtractionJob":
        if (self.result_recipe_id is not None) != (self.status == JobStatus.SUCCEEDED):
            raise ValueError("result_recipe_id must be set exactly when the job succeeded")
        if (self.error_message is not None) != (self.status == JobStatus.FAILED):
            raise ValueError("error_message must be set exactly when the job failed")
        if (self.completed_at is not None) != self.status.is_terminal:
            raise ValueError("completed_at must be set exactly when the job is terminal")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


class JobStatusView(BaseModel):
    """Read-only polling view of a job."""

    id: str
    status: JobStatus
    result_recipe_id: str | None = None
    error_message: str | None = None
    created_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_job(cls, job: ExtractionJob) -> "JobStatusView":
        return cls(
            id=job.id,
            status=job.status,
            result_recipe_id=job.result_recipe_id,
            error_message=job.error_message,
            created_at=job.created_at,
            completed_at=job.completed_at,
        )


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(
    job: ExtractionJob,
    target: JobStatus,
    *,
    result_recipe_id: str | None = None,
    error_message: str | None = None,
    now: datetime | None = None,
) -> ExtractionJob:
    """
    Derive the next job snapshot.

    Args:
        job: Current snapshot
        target: Status to move to
        result_recipe_id: Required when moving to succeeded
        error_message: Required when moving to failed
        now: Completion timestamp override (tests)

    Returns:
        New ExtractionJob; the input is left untouched

    Raises:
        InvalidTransitionError: If target is not reachable from job.status
        ValueError: If the terminal fields do not match the target
    """
    if not can_transition(job.status, target):
        raise InvalidTransitionError(job.status.value, target.value)

    if target == JobStatus.FAILED and not (error_message and error_message.strip()):
        error_message = "Failed to process recipe"

    data = job.model_dump()
    data.update(
        status=target,
        result_recipe_id=result_recipe_id if target == JobStatus.SUCCEEDED else None,
        error_message=error_message if target == JobStatus.FAILED else None,
        completed_at=(now or _utc_now()) if target.is_terminal else None,
    )
    return ExtractionJob(**data)
