"""Cooking quantity arithmetic."""

from recipe_intake.tools.units import (
    format_amount,
    is_discrete_unit,
    parse_amount,
    round_for_unit,
    scale_amount,
    should_round_up,
)

__all__ = [
    "parse_amount",
    "format_amount",
    "scale_amount",
    "round_for_unit",
    "is_discrete_unit",
    "should_round_up",
]
