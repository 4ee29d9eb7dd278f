"""
Recipe Intake - Model Router.

Selects model and sampling parameters for each pipeline stage.

Stages:
- extraction: structured JSON recipe from text/photos -> settings.extraction_model
- alt_text: short description of the generated photo -> settings.vision_model
- image: dish photo -> settings.image_model
"""

from typing import Literal, TypedDict

from recipe_intake.config import settings

Stage = Literal["extraction", "alt_text", "image"]


class ModelConfig(TypedDict, total=False):
    """Configuration for model calls."""

    model: str
    temperature: float
    max_tokens: int
    size: str


# Extraction should be deterministic; alt text can be a little freer
STAGE_TEMPERATURE: dict[str, float] = {
    "extraction": 0.2,
    "alt_text": 0.5,
}

STAGE_MAX_TOKENS: dict[str, int] = {
    "extraction": 4000,
    "alt_text": 100,
}


def get_stage_config(stage: Stage | str) -> ModelConfig:
    """
    Get model configuration for a pipeline stage.

    Args:
        stage: "extraction", "alt_text" or "image"

    Returns:
        Model configuration for the stage
    """
    if stage == "image":
        return {"model": settings.image_model, "size": settings.image_size}

    model = settings.vision_model if stage == "alt_text" else settings.extraction_model
    config: ModelConfig = {"model": model}

    if stage in STAGE_TEMPERATURE:
        config["temperature"] = STAGE_TEMPERATURE[stage]
    if stage in STAGE_MAX_TOKENS:
        config["max_tokens"] = STAGE_MAX_TOKENS[stage]

    return config
