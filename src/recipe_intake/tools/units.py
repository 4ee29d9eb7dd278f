"""
Recipe Intake - Quantity Handling.

Cooking amounts are stored as display strings ("2", "1/2", "1 1/2", "0.3")
and converted to floats only for arithmetic. Every displayed or exported
ingredient line goes through scale_amount() when a serving multiplier is
selected, so the output always stays in cooking notation.
"""

import math
import re

# Absolute tolerance when matching a remainder against a common fraction
TOLERANCE = 1e-4

# Common fractions used in cooking, checked in order
COMMON_FRACTIONS: list[tuple[float, str]] = [
    (1 / 8, "1/8"),
    (1 / 4, "1/4"),
    (1 / 3, "1/3"),
    (3 / 8, "3/8"),
    (1 / 2, "1/2"),
    (5 / 8, "5/8"),
    (2 / 3, "2/3"),
    (3 / 4, "3/4"),
    (7 / 8, "7/8"),
]

UNICODE_FRACTIONS = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

# Indivisible countable items - a scaled amount is rounded to a whole count
DISCRETE_UNITS = {
    "clove", "cloves",
    "leaf", "leaves",
    "sprig", "sprigs",
    "whole", "piece", "pieces",
    "egg", "eggs",
}

# Units with a natural minimum of one - small scaled amounts round up
SMALL_UNITS = {
    "pinch", "pinches",
    "dash", "dashes",
    "smidgen", "smidgens",
}

_MIXED_RE = re.compile(r"^(-?)(\d+)\s+(\d+)/(\d+)$")
_FRACTION_RE = re.compile(r"^(-?)(\d+)/(\d+)$")
_NUMBER_PREFIX_RE = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")


def _expand_unicode_fractions(text: str) -> str:
    """Rewrite "1½" as "1 1/2" and "½" as "1/2"."""
    text = text.replace("⁄", "/")  # fraction slash
    for char, fraction in UNICODE_FRACTIONS.items():
        if char in text:
            text = re.sub(rf"(\d)\s*{char}", rf"\1 {fraction}", text)
            text = text.replace(char, fraction)
    return text


def parse_amount(text: str | float | int | None) -> float:
    """
    Parse a cooking amount to a float.

    Supports integers and decimals, simple fractions ("1/2"), mixed numbers
    ("1 1/2") and unicode fractions ("1½"), each with an optional leading
    minus. Free text keeps its leading number ("2 large" -> 2).

    Never raises: anything unparseable is 0.0.

    Examples:
        "1/2" -> 0.5
        "1 1/2" -> 1.5
        "-3/4" -> -0.75
        "to taste" -> 0.0
    """
    if text is None or isinstance(text, bool):
        return 0.0

    if isinstance(text, (int, float)):
        return float(text) if math.isfinite(text) else 0.0

    trimmed = _expand_unicode_fractions(str(text).strip())

    match = _MIXED_RE.match(trimmed)
    if match:
        sign = -1 if match.group(1) == "-" else 1
        whole, numerator, denominator = (int(g) for g in match.group(2, 3, 4))
        if denominator == 0:
            return 0.0
        return sign * (whole + numerator / denominator)

    match = _FRACTION_RE.match(trimmed)
    if match:
        sign = -1 if match.group(1) == "-" else 1
        numerator, denominator = int(match.group(2)), int(match.group(3))
        if denominator == 0:
            return 0.0
        return sign * (numerator / denominator)

    match = _NUMBER_PREFIX_RE.match(trimmed)
    if match:
        return float(match.group(0))

    return 0.0


def format_amount(value: float) -> str:
    """
    Format a float in cooking notation.

    The fractional remainder is matched against COMMON_FRACTIONS; when
    nothing is close enough the value is rounded to two decimals with
    trailing zeros trimmed.

    Examples:
        0.5 -> "1/2"
        1.5 -> "1 1/2"
        2.0 -> "2"
        0.2 -> "0.2"
    """
    if not math.isfinite(value) or abs(value) < TOLERANCE:
        return "0"

    sign = "-" if value < 0 else ""
    value = abs(value)

    whole = math.floor(value)
    remainder = value - whole

    if remainder < TOLERANCE:
        return f"{sign}{whole}"
    if 1 - remainder < TOLERANCE:
        return f"{sign}{whole + 1}"

    for fraction_value, fraction in COMMON_FRACTIONS:
        if abs(remainder - fraction_value) < TOLERANCE:
            if whole == 0:
                return f"{sign}{fraction}"
            return f"{sign}{whole} {fraction}"

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text == "0":
        return "0"
    return f"{sign}{text}"


def is_discrete_unit(unit: str | None) -> bool:
    """True for units that count indivisible items (cloves, eggs, sprigs)."""
    return bool(unit) and unit.strip().lower() in DISCRETE_UNITS


def should_round_up(unit: str | None) -> bool:
    """True for units where amounts below one round up (pinch, dash)."""
    return bool(unit) and unit.strip().lower() in SMALL_UNITS


def round_for_unit(value: float, unit: str | None) -> float:
    """
    Apply unit-aware rounding to a scaled amount.

    Discrete units round to the nearest whole count, never below one.
    Small units round anything under one up to one. Other units and
    non-positive values are returned unchanged.
    """
    if value <= 0:
        return value

    if is_discrete_unit(unit):
        return float(max(1, math.floor(value + 0.5)))

    if should_round_up(unit) and value < 1:
        return 1.0

    return value


def scale_amount(
    amount: str | float | int | None,
    factor: float,
    unit: str | None = "",
    *,
    unit_aware: bool = True,
) -> str:
    """
    Scale an amount by a multiplier and format it in cooking notation.

    scale_amount(x, 1) is the canonical form of x ("0.5" -> "1/2") for every
    unit; unit-aware rounding only applies when the amount is rescaled.

    Args:
        amount: Amount string as stored on the ingredient
        factor: Positive serving multiplier
        unit: Ingredient unit, consulted for rounding
        unit_aware: Apply round_for_unit() before formatting

    Returns:
        Scaled amount string
    """
    value = parse_amount(amount) * factor
    if unit_aware and factor != 1:
        value = round_for_unit(value, unit)
    return format_amount(value)
