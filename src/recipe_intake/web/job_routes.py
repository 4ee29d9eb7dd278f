"""API endpoints for polling extraction jobs."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from recipe_intake.jobs.models import ExtractionJob, JobStatus, JobStatusView
from recipe_intake.jobs.service import JobService
from recipe_intake.web.auth import AuthenticatedUser, get_current_user
from recipe_intake.web.dependencies import get_job_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


class ActiveJobResponse(BaseModel):
    """Active job without its raw content."""

    id: str
    input_kind: str
    status: JobStatus
    created_at: datetime

    @classmethod
    def from_job(cls, job: ExtractionJob) -> "ActiveJobResponse":
        return cls(
            id=job.id,
            input_kind=job.input_kind.value,
            status=job.status,
            created_at=job.created_at,
        )


@router.get("/active", response_model=list[ActiveJobResponse])
def list_active_jobs(
    user: AuthenticatedUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> list[ActiveJobResponse]:
    """Jobs of the current user that have not finished yet."""
    return [ActiveJobResponse.from_job(job) for job in service.list_active_jobs(user.id)]


@router.get("/{job_id}/status", response_model=JobStatusView)
def get_job_status(
    job_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> JobStatusView:
    """Poll a job: still working, done with a recipe id, or failed with a reason."""
    job = service.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")

    if job.owner_id != user.id:
        raise HTTPException(status_code=403, detail="Access denied")

    return JobStatusView.from_job(job)
