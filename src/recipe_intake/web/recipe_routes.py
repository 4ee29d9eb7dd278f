"""API endpoints for recipe processing and quantity scaling."""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator

from recipe_intake.config import settings
from recipe_intake.exceptions import InvalidInputError, PersistenceError, RateLimitedError
from recipe_intake.jobs.service import JobService
from recipe_intake.tools.units import scale_amount
from recipe_intake.web.auth import AuthenticatedUser, get_current_user
from recipe_intake.web.dependencies import get_job_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipes"])


# =============================================================================
# Request/Response Models
# =============================================================================


class ProcessRequest(BaseModel):
    """Raw recipe content to extract."""

    method: str = "text"  # "photo" | "camera" | "text" | "url"
    content: str = ""


class ProcessResponse(BaseModel):
    """Accepted extraction job."""

    job_id: str
    status: str = "pending"


class IngredientAmount(BaseModel):
    name: str = ""
    amount: str = "1"
    unit: str = ""


class ScaleRequest(BaseModel):
    """Scale ingredient amounts by a factor or to a serving count."""

    ingredients: list[IngredientAmount]
    factor: float | None = Field(default=None, gt=0)
    servings: int | None = Field(default=None, gt=0)
    base_servings: int | None = Field(default=None, gt=0)
    unit_aware: bool | None = None

    @model_validator(mode="after")
    def _check_target(self) -> "ScaleRequest":
        if self.factor is None and not (self.servings and self.base_servings):
            raise ValueError("Provide factor, or servings with base_servings")
        if self.factor is not None and not math.isfinite(self.factor):
            raise ValueError("factor must be finite")
        return self

    @property
    def effective_factor(self) -> float:
        if self.factor is not None:
            return self.factor
        return self.servings / self.base_servings


class ScaleResponse(BaseModel):
    factor: float
    ingredients: list[IngredientAmount]


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/recipes/process", status_code=202, response_model=ProcessResponse)
async def process_recipe(
    req: ProcessRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    Start extracting a recipe from photos, pasted text or page text.

    Returns immediately with a job id; poll /jobs/{job_id}/status for the result.
    """
    logger.info(f"Process request from user {user.id} (method={req.method})")

    try:
        job_id = await service.submit(user.id, req.method, req.content)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except RateLimitedError as e:
        headers = {}
        if e.retry_after_seconds is not None:
            headers["Retry-After"] = str(math.ceil(e.retry_after_seconds))
        return JSONResponse(status_code=429, content={"detail": str(e)}, headers=headers)
    except PersistenceError as e:
        logger.error(f"Failed to create job for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process recipe") from e

    return ProcessResponse(job_id=job_id)


@router.post("/recipes/scale", response_model=ScaleResponse)
async def scale_recipe_amounts(req: ScaleRequest) -> ScaleResponse:
    """Scale ingredient amounts for display or export."""
    factor = req.effective_factor
    unit_aware = settings.unit_aware_scaling if req.unit_aware is None else req.unit_aware

    return ScaleResponse(
        factor=factor,
        ingredients=[
            IngredientAmount(
                name=ing.name,
                amount=scale_amount(ing.amount, factor, ing.unit, unit_aware=unit_aware),
                unit=ing.unit,
            )
            for ing in req.ingredients
        ],
    )
