"""Data models for recipe extraction."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from recipe_intake.tools.units import scale_amount


class InputKind(str, Enum):
    """Kind of raw content a job was created from."""

    PHOTO = "photo"
    TEXT = "text"
    URL = "url"


class RecipeCategory(str, Enum):
    """Fixed recipe categories."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    APPETIZER = "Appetizer"
    DRINK = "Drink"
    DESSERT = "Dessert"


DEFAULT_CATEGORY = RecipeCategory.DINNER
DEFAULT_SERVINGS = 4


class ContentPart(BaseModel):
    """One part of a multi-modal model request."""

    type: Literal["text", "image_url"]
    text: str | None = None
    image_url: str | None = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def from_image(cls, url: str) -> "ContentPart":
        return cls(type="image_url", image_url=url)

    def to_openai(self) -> dict:
        """Render as an OpenAI chat content part."""
        if self.type == "text":
            return {"type": "text", "text": self.text or ""}
        return {"type": "image_url", "image_url": {"url": self.image_url or ""}}


class Ingredient(BaseModel):
    """A single ingredient line."""

    name: str
    amount: str = "1"
    unit: str = ""


class RecipeGroup(BaseModel):
    """A named section of a recipe, e.g. "Meatballs"."""

    name: str
    ingredients: list[Ingredient]
    instructions: list[str]


class RecipeCandidate(BaseModel):
    """Validated recipe that has not been persisted yet."""

    name: str
    category: RecipeCategory = DEFAULT_CATEGORY
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    servings: int = DEFAULT_SERVINGS
    groups: list[RecipeGroup] = Field(min_length=1)
    image_url: str | None = None
    image_alt_text: str | None = None
    meta_description: str | None = None
    seo_keywords: list[str] | None = None

    def scaled(self, factor: float, *, unit_aware: bool = True) -> "RecipeCandidate":
        """Return a copy with every amount multiplied by factor."""
        groups = [
            group.model_copy(
                update={
                    "ingredients": [
                        ing.model_copy(
                            update={
                                "amount": scale_amount(
                                    ing.amount, factor, ing.unit, unit_aware=unit_aware
                                )
                            }
                        )
                        for ing in group.ingredients
                    ]
                }
            )
            for group in self.groups
        ]
        servings = max(1, round(self.servings * factor))
        return self.model_copy(update={"groups": groups, "servings": servings})

    def for_servings(self, servings: int, *, unit_aware: bool = True) -> "RecipeCandidate":
        """Return a copy scaled to the given number of servings."""
        if servings <= 0:
            raise ValueError("servings must be positive")
        return self.scaled(servings / self.servings, unit_aware=unit_aware)
