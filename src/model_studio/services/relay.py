"""Turns the model's returned parts into a generation result."""

import logging
from collections.abc import Iterable

from ..exceptions import NoImageReturnedError
from ..models.generation import GenerationResult
from ..models.parts import ImagePart, Part, TextPart

logger = logging.getLogger(__name__)


def extract_result(parts: Iterable[Part]) -> GenerationResult:
    """Pick the first image part and the first non-empty text part."""
    image: ImagePart | None = None
    text: str | None = None

    for part in parts:
        if isinstance(part, ImagePart):
            if image is None:
                image = part
        elif isinstance(part, TextPart):
            if text is None and part.text:
                text = part.text

    return GenerationResult(image=image, text=text)


def relay_result(parts: Iterable[Part]) -> GenerationResult:
    """
    Same as extract_result, but a result without an image is an error.

    Raises:
        NoImageReturnedError: if no image part was returned, even when the
            model did answer with text.
    """
    result = extract_result(parts)
    if not result.succeeded:
        if result.text:
            logger.warning(f"Model returned text only: {result.text[:200]}")
        raise NoImageReturnedError()
    return result
