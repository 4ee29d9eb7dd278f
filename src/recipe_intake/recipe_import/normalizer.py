"""
Normalization of raw job input into model-ready content parts.

Photos arrive as a single string of base64 payloads joined by
IMAGE_SEPARATOR (recipes are often photographed across several cookbook
pages). Text and URL input arrive already resolved to plain text.
"""

import re

from recipe_intake.exceptions import InvalidInputError

from .models import ContentPart, InputKind

IMAGE_SEPARATOR = "|||IMAGE_SEPARATOR|||"

# Accepted aliases for input kinds sent by clients
INPUT_KIND_ALIASES = {
    "camera": InputKind.PHOTO,
}

_DATA_URL_RE = re.compile(r"^data:([^;,]+)?(;base64)?,", re.IGNORECASE)


def parse_input_kind(value: str | InputKind) -> InputKind:
    """Resolve a client-supplied method name to an InputKind."""
    if isinstance(value, InputKind):
        return value

    key = (value or "").strip().lower()
    if key in INPUT_KIND_ALIASES:
        return INPUT_KIND_ALIASES[key]

    try:
        return InputKind(key)
    except ValueError:
        raise InvalidInputError(f"Unsupported input kind: {value!r}") from None


def split_images(raw_content: str) -> list[str]:
    """
    Split a joined photo payload into individual images, preserving order.

    Empty and whitespace-only segments are dropped.
    """
    return [segment.strip() for segment in raw_content.split(IMAGE_SEPARATOR) if segment.strip()]


def to_data_url(image: str, default_mime: str = "image/jpeg") -> str:
    """Wrap a bare base64 payload as a data URL; data and http URLs pass through."""
    if _DATA_URL_RE.match(image) or image.startswith(("http://", "https://")):
        return image
    return f"data:{default_mime};base64,{image}"


def normalize_content(input_kind: str | InputKind, raw_content: str | None) -> list[ContentPart]:
    """
    Turn raw job input into an ordered list of content parts.

    Args:
        input_kind: photo (or camera), text or url
        raw_content: Joined base64 images for photos, resolved text otherwise

    Returns:
        Image parts in upload order for photos, a single text part otherwise

    Raises:
        InvalidInputError: If the content is empty or the kind is unknown
    """
    kind = parse_input_kind(input_kind)

    if not raw_content or not raw_content.strip():
        raise InvalidInputError("Recipe content is required")

    if kind == InputKind.PHOTO:
        images = split_images(raw_content)
        if not images:
            raise InvalidInputError("At least one image is required")
        return [ContentPart.from_image(to_data_url(image)) for image in images]

    return [ContentPart.from_text(raw_content.strip())]
