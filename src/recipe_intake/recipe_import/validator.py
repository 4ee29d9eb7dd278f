"""
Validation and repair of model-returned recipe JSON.

Model output is treated as an untyped tree and converted into a
RecipeCandidate in a single pass. Structural problems that leave no usable
recipe are rejected; cosmetic ones (unknown category, missing amounts,
blank steps) are repaired silently.
"""

import json
import math
import re
from typing import Any

from recipe_intake.exceptions import ExtractionValidationError

from .models import (
    DEFAULT_CATEGORY,
    DEFAULT_SERVINGS,
    Ingredient,
    RecipeCandidate,
    RecipeCategory,
    RecipeGroup,
)

DEFAULT_AMOUNT = "1"

_CATEGORIES_BY_NAME = {category.value.lower(): category for category in RecipeCategory}

_ISO_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    content = text.strip()
    if not content.startswith("```"):
        return content

    lines = content.split("\n")
    if lines[0].startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _text(value: Any) -> str:
    """Coerce a scalar to trimmed text; anything else is empty."""
    if isinstance(value, str):
        return value.strip()
    if _is_number(value):
        return str(int(value)) if float(value).is_integer() else str(value)
    return ""


def coerce_minutes(value: Any) -> int | None:
    """
    Coerce a prep/cook time to whole minutes.

    None means "not specified" and is kept distinct from zero.

    Examples:
        25 -> 25
        "30" -> 30
        "PT1H30M" -> 90
        None, "", "soon", -5 -> None
    """
    if _is_number(value):
        minutes = int(round(value))
        return minutes if minutes >= 0 else None

    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    match = _ISO_DURATION_RE.match(text)
    if match and (match.group(1) or match.group(2)):
        return int(match.group(1) or 0) * 60 + int(match.group(2) or 0)

    try:
        minutes = int(round(float(text)))
    except (ValueError, OverflowError):
        return None
    return minutes if minutes >= 0 else None


def coerce_servings(value: Any) -> int:
    """Coerce servings to a positive integer, defaulting to 4."""
    servings: float | None = None
    if _is_number(value):
        servings = value
    elif isinstance(value, str):
        match = re.search(r"-?\d+", value)
        if match:
            servings = int(match.group(0))

    if servings is None or servings < 1:
        return DEFAULT_SERVINGS
    return int(servings)


def coerce_category(value: Any) -> RecipeCategory:
    """Map a reported category onto the fixed enumeration, defaulting to Dinner."""
    if isinstance(value, str):
        category = _CATEGORIES_BY_NAME.get(value.strip().lower())
        if category is not None:
            return category
    return DEFAULT_CATEGORY


def _validate_ingredients(items: list[Any]) -> list[Ingredient]:
    ingredients = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = _text(item.get("name"))
        if not name:
            continue
        ingredients.append(
            Ingredient(
                name=name,
                amount=_text(item.get("amount")) or DEFAULT_AMOUNT,
                unit=_text(item.get("unit")),
            )
        )
    return ingredients


def _validate_group(index: int, group: Any) -> RecipeGroup:
    if not isinstance(group, dict):
        raise ExtractionValidationError(f"Invalid recipe structure: group {index + 1} is not an object")

    name = _text(group.get("name"))
    if not name:
        raise ExtractionValidationError(f"Invalid recipe structure: group {index + 1} has no name")

    ingredients = group.get("ingredients")
    instructions = group.get("instructions")
    if not isinstance(ingredients, list) or not isinstance(instructions, list):
        raise ExtractionValidationError(
            f"Invalid recipe structure: group '{name}' must have ingredient and instruction lists"
        )

    valid_ingredients = _validate_ingredients(ingredients)
    valid_instructions = [step.strip() for step in instructions if isinstance(step, str) and step.strip()]

    if not valid_ingredients:
        raise ExtractionValidationError(f"Group '{name}' has no usable ingredients")
    if not valid_instructions:
        raise ExtractionValidationError(f"Group '{name}' has no usable instructions")

    return RecipeGroup(name=name, ingredients=valid_ingredients, instructions=valid_instructions)


def _first_present(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def validate_recipe_data(data: Any) -> RecipeCandidate:
    """
    Validate a decoded model response and build a RecipeCandidate.

    Raises:
        ExtractionValidationError: If no usable recipe can be built
    """
    if not isinstance(data, dict):
        raise ExtractionValidationError("Could not extract valid recipe from content: expected a JSON object")

    name = _text(data.get("name"))
    groups = data.get("groups")
    if not name or not isinstance(groups, list) or not groups:
        raise ExtractionValidationError("Could not extract valid recipe from content")

    validated_groups = [_validate_group(i, group) for i, group in enumerate(groups)]

    meta_description = _text(data.get("metaDescription")) or None

    keywords = data.get("seoKeywords")
    seo_keywords = None
    if isinstance(keywords, list):
        seo_keywords = [kw for kw in (_text(k) for k in keywords) if kw]

    return RecipeCandidate(
        name=name,
        category=coerce_category(data.get("category")),
        prep_time_minutes=coerce_minutes(_first_present(data, "prepTime", "prepTimeMinutes")),
        cook_time_minutes=coerce_minutes(_first_present(data, "cookTime", "cookTimeMinutes")),
        servings=coerce_servings(data.get("servings")),
        groups=validated_groups,
        meta_description=meta_description,
        seo_keywords=seo_keywords,
    )


def validate_extraction(raw_json: str) -> RecipeCandidate:
    """
    Parse model JSON text and validate it.

    Same input always yields the same candidate or the same rejection.

    Raises:
        ExtractionValidationError: On a JSON parse error or schema violation
    """
    if not raw_json or not raw_json.strip():
        raise ExtractionValidationError("Failed to parse recipe data: empty response")

    try:
        data = json.loads(strip_code_fences(raw_json))
    except json.JSONDecodeError as e:
        raise ExtractionValidationError(f"Failed to parse recipe data: {e.msg}") from e

    return validate_recipe_data(data)
