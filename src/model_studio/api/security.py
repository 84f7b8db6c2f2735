"""Upload validation for the API."""

import logging

from starlette.datastructures import UploadFile

from ..exceptions import ImageTooLargeError, MissingProductError, UploadValidationError
from ..models.generation import SUPPORTED_ASPECT_RATIOS, FileRole, UploadedFile
from ..services.mime import detect_mime_type
from .config import settings

logger = logging.getLogger(__name__)


def validate_mime_type(mime_type: str, allowed: list[str] | None = None) -> bool:
    """Validate the file's MIME type is one the model accepts."""
    if allowed is None:
        allowed = settings.ALLOWED_MIME_TYPES

    if not mime_type:
        return False

    return mime_type.lower() in allowed


def validate_aspect_ratio(aspect_ratio: str) -> str:
    """Return the aspect ratio, or raise if the model does not support it."""
    if aspect_ratio not in SUPPORTED_ASPECT_RATIOS:
        raise UploadValidationError(
            f"Unsupported aspect ratio '{aspect_ratio}'. "
            f"Use one of: {', '.join(SUPPORTED_ASPECT_RATIOS)}",
            status_code=400,
        )
    return aspect_ratio


async def read_upload(value: UploadFile | str | None, role: FileRole) -> UploadedFile | None:
    """
    Read one multipart file field into an UploadedFile.

    Browsers send an empty part when no file was chosen; that maps to None.

    Raises:
        UploadValidationError: file or pixel count too large (413) or not a
            supported image (415)
    """
    if not isinstance(value, UploadFile):
        return None

    data = await value.read()
    await value.close()

    if not data:
        return None

    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise UploadValidationError(
            f"The {role} image exceeds the {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit.",
            status_code=413,
        )

    filename = value.filename or ""
    try:
        mime_type = detect_mime_type(data, filename, declared=value.content_type)
    except ImageTooLargeError as e:
        logger.warning(f"Rejected {role} upload '{filename}': {e}")
        raise UploadValidationError(
            f"The {role} image has too many pixels to process.",
            status_code=413,
        ) from e
    if not validate_mime_type(mime_type):
        logger.warning(f"Rejected {role} upload '{filename}' with type {mime_type}")
        raise UploadValidationError(
            f"The {role} file must be a PNG, JPEG, WEBP or HEIC image.",
            status_code=415,
        )

    return UploadedFile(role=role, filename=filename, mime_type=mime_type, data=data)


async def read_product(value: UploadFile | str | None) -> UploadedFile:
    """Like read_upload, but the product image is required."""
    product = await read_upload(value, "product")
    if product is None:
        raise MissingProductError()
    return product
