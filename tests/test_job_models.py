"""Tests for the job state machine."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from recipe_intake.exceptions import InvalidTransitionError
from recipe_intake.jobs.models import (
    ALLOWED_TRANSITIONS,
    ExtractionJob,
    JobStatus,
    JobStatusView,
    can_transition,
    transition,
)
from recipe_intake.recipe_import.models import InputKind


@pytest.fixture
def job():
    return ExtractionJob(owner_id="user-1", input_kind=InputKind.TEXT, raw_content="Soup")


def _advance(job, *statuses):
    for status in statuses:
        job = transition(job, status)
    return job


class TestNewJob:
    def test_defaults(self, job):
        assert job.status == JobStatus.PENDING
        assert job.result_recipe_id is None
        assert job.error_message is None
        assert job.completed_at is None
        assert job.created_at.tzinfo is not None
        assert not job.is_terminal

    def test_ids_are_unique(self):
        a = ExtractionJob(owner_id="u", input_kind=InputKind.TEXT, raw_content="x")
        b = ExtractionJob(owner_id="u", input_kind=InputKind.TEXT, raw_content="x")
        assert a.id != b.id

    def test_frozen(self, job):
        with pytest.raises(ValidationError):
            job.status = JobStatus.FAILED


class TestTransitions:
    """Tests for the allowed status graph."""

    def test_forward_path(self, job):
        job = _advance(
            job,
            JobStatus.EXTRACTING,
            JobStatus.VALIDATING,
            JobStatus.GENERATING_IMAGE,
            JobStatus.SAVING,
        )
        done = transition(job, JobStatus.SUCCEEDED, result_recipe_id="recipe-1")

        assert done.status == JobStatus.SUCCEEDED
        assert done.result_recipe_id == "recipe-1"
        assert done.error_message is None
        assert done.completed_at is not None
        assert done.is_terminal

    def test_transition_returns_new_snapshot(self, job):
        moved = transition(job, JobStatus.EXTRACTING)
        assert job.status == JobStatus.PENDING
        assert moved.status == JobStatus.EXTRACTING
        assert moved.id == job.id
        assert moved.created_at == job.created_at

    @pytest.mark.parametrize("status", [JobStatus.EXTRACTING, JobStatus.VALIDATING, JobStatus.SAVING])
    def test_failed_reachable(self, job, status):
        path = [JobStatus.EXTRACTING, JobStatus.VALIDATING, JobStatus.GENERATING_IMAGE, JobStatus.SAVING]
        job = _advance(job, *path[: path.index(status) + 1])

        failed = transition(job, JobStatus.FAILED, error_message="boom")

        assert failed.status == JobStatus.FAILED
        assert failed.error_message == "boom"
        assert failed.result_recipe_id is None
        assert failed.completed_at is not None

    def test_image_stage_cannot_fail(self, job):
        job = _advance(job, JobStatus.EXTRACTING, JobStatus.VALIDATING, JobStatus.GENERATING_IMAGE)
        with pytest.raises(InvalidTransitionError):
            transition(job, JobStatus.FAILED, error_message="no image")

    def test_pending_cannot_skip_ahead(self, job):
        with pytest.raises(InvalidTransitionError):
            transition(job, JobStatus.VALIDATING)
        with pytest.raises(InvalidTransitionError):
            transition(job, JobStatus.SUCCEEDED, result_recipe_id="r")

    def test_no_backward_moves(self, job):
        job = _advance(job, JobStatus.EXTRACTING, JobStatus.VALIDATING)
        with pytest.raises(InvalidTransitionError):
            transition(job, JobStatus.EXTRACTING)

    @pytest.mark.parametrize("target", list(JobStatus))
    def test_terminal_jobs_are_immutable(self, job, target):
        failed = transition(_advance(job, JobStatus.EXTRACTING), JobStatus.FAILED, error_message="x")
        with pytest.raises(InvalidTransitionError):
            transition(failed, target)

    def test_graph_is_acyclic_and_terminal_sinks(self):
        assert ALLOWED_TRANSITIONS[JobStatus.SUCCEEDED] == frozenset()
        assert ALLOWED_TRANSITIONS[JobStatus.FAILED] == frozenset()
        for current, targets in ALLOWED_TRANSITIONS.items():
            assert current not in targets

    def test_can_transition(self):
        assert can_transition(JobStatus.PENDING, JobStatus.EXTRACTING)
        assert not can_transition(JobStatus.PENDING, JobStatus.FAILED)
        assert not can_transition(JobStatus.GENERATING_IMAGE, JobStatus.FAILED)


class TestTerminalFields:
    """result_recipe_id / error_message / completed_at track the status."""

    def test_blank_failure_message_gets_default(self, job):
        failed = transition(_advance(job, JobStatus.EXTRACTING), JobStatus.FAILED, error_message="  ")
        assert failed.error_message == "Failed to process recipe"

    def test_success_without_recipe_id_rejected(self, job):
        job = _advance(
            job, JobStatus.EXTRACTING, JobStatus.VALIDATING, JobStatus.GENERATING_IMAGE, JobStatus.SAVING
        )
        with pytest.raises(ValidationError):
            transition(job, JobStatus.SUCCEEDED)

    def test_non_terminal_ignores_terminal_fields(self, job):
        moved = transition(job, JobStatus.EXTRACTING, result_recipe_id="r", error_message="e")
        assert moved.result_recipe_id is None
        assert moved.error_message is None
        assert moved.completed_at is None

    def test_completed_at_override(self, job):
        now = datetime(2025, 1, 1, tzinfo=UTC)
        failed = transition(_advance(job, JobStatus.EXTRACTING), JobStatus.FAILED, error_message="x", now=now)
        assert failed.completed_at == now

    def test_inconsistent_rows_rejected(self):
        with pytest.raises(ValidationError):
            ExtractionJob(
                owner_id="u",
                input_kind=InputKind.TEXT,
                raw_content="x",
                status=JobStatus.SUCCEEDED,
                completed_at=datetime.now(UTC),
            )
        with pytest.raises(ValidationError):
            ExtractionJob(
                owner_id="u",
                input_kind=InputKind.TEXT,
                raw_content="x",
                status=JobStatus.PENDING,
                error_message="x",
            )
        with pytest.raises(ValidationError):
            ExtractionJob(
                owner_id="u",
                input_kind=InputKind.TEXT,
                raw_content="x",
                status=JobStatus.FAILED,
                error_message="x",
            )

    def test_status_view(self, job):
        view = JobStatusView.from_job(job)
        assert view.id == job.id
        assert view.status == JobStatus.PENDING
        assert view.result_recipe_id is None
        assert "raw_content" not in view.model_dump()
