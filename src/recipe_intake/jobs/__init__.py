"""
Extraction job lifecycle.

JobService (recipe_intake.jobs.service) is the entry point; it is not
re-exported here because it depends on the extraction pipeline.
"""

from .models import (
    ALLOWED_TRANSITIONS,
    ExtractionJob,
    JobStatus,
    JobStatusView,
    transition,
)
from .rate_limit import QuotaDecision, QuotaTracker, MovingWindowQuota
from .store import InMemoryJobStore, JobStore, SupabaseJobStore

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ExtractionJob",
    "JobStatus",
    "JobStatusView",
    "transition",
    "QuotaDecision",
    "QuotaTracker",
    "MovingWindowQuota",
    "InMemoryJobStore",
    "JobStore",
    "SupabaseJobStore",
]
