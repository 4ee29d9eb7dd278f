"""
Recipe Intake - Exceptions.

Errors raised before a job exists (InvalidInputError, RateLimitedError) are
returned to the caller. Errors raised while a job runs
(ExtractionFailedError and subclasses) end the job in the failed state with
the exception message stored as its error message.
"""


class RecipeIntakeError(Exception):
    """Base class for all pipeline errors."""


class InvalidInputError(RecipeIntakeError):
    """Raw content is empty or malformed. No job is created."""


class RateLimitedError(RecipeIntakeError):
    """The owner exceeded the job creation quota. No job is created."""

    def __init__(self, owner_id: str, retry_after_seconds: float | None = None):
        self.owner_id = owner_id
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            "Too many recipe processing requests. Please wait before trying again."
        )


class ExtractionFailedError(RecipeIntakeError):
    """The structured recipe could not be produced."""


class EmptyResponseError(ExtractionFailedError):
    """The completion model returned no content."""


class ExtractionValidationError(ExtractionFailedError):
    """Model output was not valid JSON or violated the recipe schema."""


class InvalidTransitionError(RecipeIntakeError):
    """A job was asked to move to a status it cannot reach from its current one."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition job from '{current}' to '{target}'")


class JobNotFoundError(RecipeIntakeError):
    """No job exists with the given id."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class PersistenceError(RecipeIntakeError):
    """An external store rejected a write."""
