"""Prompt templates for extraction, image generation and alt text."""

from .models import RecipeCategory

ALT_TEXT_MAX_LENGTH = 125

_CATEGORY_CHOICES = " | ".join(f'"{category.value}"' for category in RecipeCategory)

EXTRACTION_PROMPT = f"""
Extract the recipe from the following content. Return a JSON object with this exact structure:
{{
  "name": "Recipe Name",
  "category": {_CATEGORY_CHOICES},
  "prepTime": number (in minutes) or null,
  "cookTime": number (in minutes) or null,
  "servings": number,
  "groups": [
    {{
      "name": "Main" (or section name for complex recipes),
      "ingredients": [
        {{ "name": "ingredient name", "amount": "1", "unit": "cup" }}
      ],
      "instructions": ["Step 1...", "Step 2..."]
    }}
  ],
  "metaDescription": "A compelling 150-160 character SEO description that entices users to try this recipe. Include key ingredients and cooking method.",
  "seoKeywords": ["keyword1", "keyword2", "keyword3", "keyword4", "keyword5"]
}}

For complex recipes like "Spaghetti and Meatballs", create separate groups for each component.
Use fractions for amounts where appropriate (e.g., "1/2", "1 1/2").
Use null for prepTime or cookTime when the content does not say.
Choose the most appropriate category based on the recipe.

SEO Guidelines:
- metaDescription: Write an enticing 150-160 character description focusing on taste, key ingredients, and ease of preparation. Use action words like "discover", "savor", "enjoy".
- seoKeywords: Generate 5-8 relevant search keywords including cuisine type, main ingredients, cooking method, dietary info (if applicable), occasion, and related search terms users might use.
"""

IMAGE_PROMPT_TEMPLATE = """Professional food photography of {name}.
Beautifully plated on an elegant white ceramic plate, overhead shot, soft natural lighting,
garnished elegantly, appetizing and mouthwatering presentation, restaurant quality,
high-end cookbook style photography, clean minimal background, 8k quality,
shallow depth of field, food styling."""

ALT_TEXT_PROMPT_TEMPLATE = (
    "Generate a concise, SEO-friendly alt text (max {max_length} characters) for this recipe "
    'image of "{name}". Focus on describing the dish\'s appearance, key ingredients visible, '
    'and presentation style. Do not include phrases like "image of" or "photo of".'
)


def build_extraction_instruction(text_content: str | None = None) -> str:
    """Build the extraction instruction, appending pasted text when given."""
    if text_content is None:
        return EXTRACTION_PROMPT
    return f"{EXTRACTION_PROMPT}\n\nContent to extract:\n{text_content}"


def build_image_prompt(recipe_name: str) -> str:
    return IMAGE_PROMPT_TEMPLATE.format(name=recipe_name)


def build_alt_text_prompt(recipe_name: str) -> str:
    return ALT_TEXT_PROMPT_TEMPLATE.format(name=recipe_name, max_length=ALT_TEXT_MAX_LENGTH)


def clean_alt_text(text: str | None, max_length: int = ALT_TEXT_MAX_LENGTH) -> str | None:
    """Trim quotes/whitespace and cut to max_length on a word boundary."""
    if not text:
        return None

    cleaned = " ".join(text.strip().strip('"').split())
    if not cleaned:
        return None
    if len(cleaned) <= max_length:
        return cleaned

    cut = cleaned[:max_length]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,.;:-")
