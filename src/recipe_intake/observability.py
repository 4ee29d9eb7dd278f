"""
Recipe Intake - Logging setup.

Modules log through `logging.getLogger(__name__)`; this only configures the
root handler and level for the CLI and the web app.
"""

import logging

from recipe_intake.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from settings.log_level (or an explicit level)."""
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level),
        format=LOG_FORMAT,
    )
    # httpx logs every OpenAI/Supabase request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
