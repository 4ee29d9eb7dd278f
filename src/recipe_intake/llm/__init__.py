"""
Recipe Intake - Model Client.

Async access to the completion, image and vision models.
"""

from recipe_intake.llm.client import ModelClient, OpenAIModelClient, get_client
from recipe_intake.llm.model_router import get_stage_config

__all__ = [
    "ModelClient",
    "OpenAIModelClient",
    "get_client",
    "get_stage_config",
]
