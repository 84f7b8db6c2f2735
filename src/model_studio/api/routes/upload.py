"""Upload route: product (+ pose) photo in, generated model photo out."""

import logging
from functools import lru_cache
from typing import Protocol

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ...exceptions import (
    MissingProductError,
    NoImageReturnedError,
    UploadValidationError,
)
from ...models.generation import DEFAULT_ASPECT_RATIO, GenerationRequest, RequestDraft
from ...models.parts import Part
from ...services.relay import relay_result
from ...services.request_builder import build_from_draft
from ..config import settings
from ..schemas import ErrorResponse, MessageResponse, UploadResponse
from ..security import read_product, read_upload, validate_aspect_ratio

logger = logging.getLogger(__name__)
router = APIRouter()

PARSE_ERROR = "Failed to process upload."
GENERATION_ERROR = (
    "An error occurred while generating the image. Please check the console for details."
)


class ImageGenerator(Protocol):
    async def generate(self, request: GenerationRequest) -> list[Part]: ...


@lru_cache(maxsize=1)
def get_generator() -> ImageGenerator:
    """Create the Gemini generator once, on first use."""
    from ...services.gemini_client import GeminiImageGenerator

    return GeminiImageGenerator(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload(request: Request):
    """
    Generate a model photograph from the uploaded product image.

    Multipart fields: productFile (required), poseFile (optional),
    userPrompt, selectedAspectRatio.
    """
    try:
        form = await request.form()
    except Exception as e:
        logger.error(f"Failed to parse upload form: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, PARSE_ERROR)

    try:
        product = await read_product(form.get("productFile"))
        pose = await read_upload(form.get("poseFile"), "pose")
        aspect_ratio = validate_aspect_ratio(
            str(form.get("selectedAspectRatio") or DEFAULT_ASPECT_RATIO)
        )
        user_prompt = str(form.get("userPrompt") or "")
    except MissingProductError as e:
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except UploadValidationError as e:
        return _error(e.status_code, str(e))
    except Exception as e:
        logger.error(f"Failed to read uploaded files: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, PARSE_ERROR)
    finally:
        await form.close()

    draft = RequestDraft(
        product=product,
        pose=pose,
        user_prompt=user_prompt,
        aspect_ratio=aspect_ratio,
    )
    logger.info(
        f"Upload received: product={product.filename or '-'} ({product.size} bytes), "
        f"pose={'yes' if pose else 'no'}, aspect_ratio={aspect_ratio}"
    )

    try:
        generation_request = build_from_draft(draft, model=settings.GEMINI_MODEL)
        parts = await get_generator().generate(generation_request)
        result = relay_result(parts)
    except NoImageReturnedError as e:
        logger.warning("Model did not return an image")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except Exception as e:
        logger.error(f"Error generating image from AI: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERATION_ERROR)

    return UploadResponse.from_result(result)


@router.api_route(
    "/upload",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
    response_model=MessageResponse,
    status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
)
async def upload_method_not_allowed():
    """Only POST is accepted on the upload endpoint."""
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"message": "Method Not Allowed"},
        headers={"Allow": "POST"},
    )
