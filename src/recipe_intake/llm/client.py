"""
Recipe Intake - Model Client.

Wraps the OpenAI async client for the three calls the pipeline makes:
JSON-mode recipe extraction, dish image generation and image alt text.
Every call is bounded by settings.openai_timeout_seconds and is not retried
here; retry policy belongs to the caller.
"""

import base64
import logging
from typing import Protocol, runtime_checkable

from openai import AsyncOpenAI

from recipe_intake.config import settings
from recipe_intake.exceptions import EmptyResponseError
from recipe_intake.llm.model_router import get_stage_config
from recipe_intake.llm.prompt_logger import log_prompt
from recipe_intake.recipe_import.models import ContentPart
from recipe_intake.storage.base import sniff_image_type

logger = logging.getLogger(__name__)


@runtime_checkable
class ModelClient(Protocol):
    """External generative models consumed by the extraction pipeline."""

    async def complete_json(self, parts: list[ContentPart]) -> str:
        """Send content parts, require a single JSON object back, return its text."""
        ...

    async def generate_image(self, prompt: str, size: str) -> bytes:
        """Generate an image and return its bytes."""
        ...

    async def describe_image(self, image: bytes, instruction: str) -> str:
        """Return a short text answer about an image."""
        ...


# Singleton client instance
_client: AsyncOpenAI | None = None


def get_client() -> AsyncOpenAI:
    """
    Get the shared AsyncOpenAI client.

    Uses singleton pattern to reuse connections.
    """
    global _client

    if _client is None:
        _client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )

    return _client


def _prompt_text(parts: list[ContentPart]) -> str:
    return "\n".join(part.text for part in parts if part.type == "text" and part.text)


class OpenAIModelClient:
    """ModelClient backed by the OpenAI API."""

    def __init__(self, client: AsyncOpenAI | None = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_client()
        return self._client

    async def complete_json(self, parts: list[ContentPart]) -> str:
        config = get_stage_config("extraction")
        model = config["model"]
        image_count = sum(1 for part in parts if part.type == "image_url")

        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": [part.to_openai() for part in parts]}],
                response_format={"type": "json_object"},
                temperature=config.get("temperature", 0.2),
                max_tokens=config.get("max_tokens", 4000),
            )
        except Exception as e:
            log_prompt(stage="extraction", model=model, prompt=_prompt_text(parts),
                       image_count=image_count, error=str(e))
            raise

        content = completion.choices[0].message.content if completion.choices else None
        log_prompt(stage="extraction", model=model, prompt=_prompt_text(parts),
                   image_count=image_count, response=content)

        if not content or not content.strip():
            raise EmptyResponseError("Failed to extract recipe: the model returned an empty response")

        return content

    async def generate_image(self, prompt: str, size: str) -> bytes:
        config = get_stage_config("image")
        model = config["model"]

        kwargs = {"model": model, "prompt": prompt, "size": size, "n": 1}
        if model.startswith("dall-e"):
            # dall-e defaults to hosted URLs; gpt-image models always return base64
            kwargs["response_format"] = "b64_json"

        try:
            response = await self.client.images.generate(**kwargs)
        except Exception as e:
            log_prompt(stage="image", model=model, prompt=prompt, error=str(e))
            raise

        b64_data = response.data[0].b64_json if response.data else None
        if not b64_data:
            log_prompt(stage="image", model=model, prompt=prompt, error="no image data")
            raise EmptyResponseError("Image generation returned no data")

        log_prompt(stage="image", model=model, prompt=prompt, response=f"<{len(b64_data)} base64 chars>")
        return base64.b64decode(b64_data)

    async def describe_image(self, image: bytes, instruction: str) -> str:
        config = get_stage_config("alt_text")
        model = config["model"]
        data_url = f"data:{sniff_image_type(image)};base64,{base64.b64encode(image).decode('ascii')}"

        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": instruction},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    }
                ],
                temperature=config.get("temperature", 0.5),
                max_tokens=config.get("max_tokens", 100),
            )
        except Exception as e:
            log_prompt(stage="alt_text", model=model, prompt=instruction, image_count=1, error=str(e))
            raise

        content = completion.choices[0].message.content if completion.choices else None
        log_prompt(stage="alt_text", model=model, prompt=instruction, image_count=1, response=content)

        if not content or not content.strip():
            raise EmptyResponseError("Alt text generation returned an empty response")
        return content.strip()
