"""Recipe import module: turns raw recipe content into validated candidates."""

from .models import (
    ContentPart,
    Ingredient,
    InputKind,
    RecipeCandidate,
    RecipeCategory,
    RecipeGroup,
)
from .normalizer import IMAGE_SEPARATOR, normalize_content, parse_input_kind
from .validator import validate_extraction, validate_recipe_data

__all__ = [
    "ContentPart",
    "Ingredient",
    "InputKind",
    "RecipeCandidate",
    "RecipeCategory",
    "RecipeGroup",
    "IMAGE_SEPARATOR",
    "normalize_content",
    "parse_input_kind",
    "validate_extraction",
    "validate_recipe_data",
]
