"""
Recipe Intake Web API - FastAPI application.

Run with: uvicorn recipe_intake.web.app:app
"""

import logging

from fastapi import FastAPI

from recipe_intake import __version__
from recipe_intake.observability import configure_logging
from recipe_intake.web.job_routes import router as job_router
from recipe_intake.web.recipe_routes import router as recipe_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers registered."""
    application = FastAPI(title="Recipe Intake", version=__version__)

    application.include_router(recipe_router, prefix="/api")
    application.include_router(job_router, prefix="/api")

    @application.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return application


configure_logging()
app = create_app()
