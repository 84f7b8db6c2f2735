"""MIME type detection for uploaded images."""

import io
import mimetypes

from PIL import Image, UnidentifiedImageError

from ..exceptions import ImageTooLargeError

# Camera JPEGs with a multi-picture segment open as MPO; they are still JPEGs
_FORMAT_MIME_OVERRIDES = {"MPO": "image/jpeg"}


def sniff_mime_type(data: bytes) -> str | None:
    """
    Detect the MIME type from the image bytes using Pillow.

    Raises:
        ImageTooLargeError: if the pixel count trips Pillow's decompression bomb limit
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format or ""
    except Image.DecompressionBombError as e:
        raise ImageTooLargeError(str(e)) from e
    except (UnidentifiedImageError, OSError):
        return None
    return _FORMAT_MIME_OVERRIDES.get(fmt) or Image.MIME.get(fmt)


def guess_mime_type(filename: str) -> str | None:
    """Guess the MIME type from the file extension."""
    if not filename:
        return None
    mime, _ = mimetypes.guess_type(filename)
    return mime


def detect_mime_type(data: bytes, filename: str = "", declared: str | None = None) -> str:
    """
    Best-effort MIME type: bytes first, then declared type, then extension.

    Falls back to application/octet-stream.
    """
    return (
        sniff_mime_type(data)
        or (declared if declared and declared != "application/octet-stream" else None)
        or guess_mime_type(filename)
        or "application/octet-stream"
    )
