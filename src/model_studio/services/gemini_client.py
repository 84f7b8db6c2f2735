"""Gemini image generation client.

Wraps google-genai so the rest of the studio only sees our own
TextPart / ImagePart types:

1. GenerationRequest parts -> types.Part (text + inline bytes)
2. generate_content with IMAGE + TEXT modalities and the aspect ratio
3. candidates[0].content.parts -> TextPart / ImagePart
"""

import asyncio
import logging

from google import genai
from google.genai import types

from ..exceptions import ConfigurationError, UpstreamError
from ..models.generation import DEFAULT_MODEL, GenerationRequest
from ..models.parts import ImagePart, Part, TextPart

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["IMAGE", "TEXT"]


def to_sdk_part(part: Part) -> types.Part:
    """Convert one of our parts into the SDK representation."""
    if isinstance(part, TextPart):
        return types.Part.from_text(text=part.text)
    return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)


def from_sdk_response(response) -> list[Part]:
    """
    Read the first candidate's parts back into our tagged union.

    Parts carrying neither inline data nor text (thoughts, function calls)
    are skipped. A response without candidates maps to an empty list.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return []

    content = getattr(candidates[0], "content", None)
    sdk_parts = getattr(content, "parts", None) or []

    parts: list[Part] = []
    for sdk_part in sdk_parts:
        inline_data = getattr(sdk_part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            parts.append(
                ImagePart(
                    mime_type=inline_data.mime_type or "image/png",
                    data=inline_data.data,
                )
            )
        elif getattr(sdk_part, "text", None):
            parts.append(TextPart(text=sdk_part.text))
    return parts


class GeminiImageGenerator:
    """Calls a Gemini image model with an ordered list of parts."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = 120.0,
    ):
        """
        Args:
            api_key: Gemini API key
            model: Image-capable Gemini model
            timeout_seconds: Upper bound for a single upstream call
        """
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        self.model = model
        self.timeout_seconds = timeout_seconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    def build_config(self, aspect_ratio: str) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=RESPONSE_MODALITIES,
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        )

    async def generate(self, request: GenerationRequest) -> list[Part]:
        """
        Send the request and return the parts of the first candidate.

        Raises:
            UpstreamError: on SDK, network or timeout failures
        """
        contents = [
            types.Content(role="user", parts=[to_sdk_part(p) for p in request.parts])
        ]
        model = request.model or self.model

        logger.info(
            f"Calling {model} with {len(request.parts)} parts "
            f"(aspect_ratio={request.aspect_ratio}, pose={request.has_pose})"
        )

        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=self.build_config(request.aspect_ratio),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamError(
                f"Gemini call timed out after {self.timeout_seconds:.0f}s"
            ) from e
        except Exception as e:
            raise UpstreamError(f"Gemini call failed: {e}") from e

        parts = from_sdk_response(response)
        logger.info(
            f"Gemini returned {len(parts)} parts "
            f"({sum(isinstance(p, ImagePart) for p in parts)} images)"
        )
        return parts
