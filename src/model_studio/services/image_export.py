"""Re-encode the generated image for download (PNG or JPEG)."""

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..exceptions import DownloadPreparationError
from ..models.generation import ExportFormat
from ..models.parts import ImagePart

logger = logging.getLogger(__name__)

DOWNLOAD_BASENAME = "generated-model"
JPEG_QUALITY = 95
WHITE = (255, 255, 255, 255)


@dataclass(frozen=True)
class DownloadArtifact:
    """A file ready to be written to disk."""

    filename: str
    mime_type: str
    data: bytes

    def save(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        with open(path, "wb") as f:
            f.write(self.data)
        return path


def download_filename(fmt: ExportFormat) -> str:
    return f"{DOWNLOAD_BASENAME}.{fmt}"


def _load(source: str | bytes | ImagePart) -> Image.Image:
    if isinstance(source, str):
        source = ImagePart.from_data_uri(source)
    if isinstance(source, ImagePart):
        source = source.data

    img = Image.open(io.BytesIO(source))
    img.load()
    return img


def flatten_on_white(img: Image.Image) -> Image.Image:
    """Composite onto opaque white so transparent pixels do not turn black."""
    rgba = img.convert("RGBA")
    background = Image.new("RGBA", rgba.size, WHITE)
    return Image.alpha_composite(background, rgba).convert("RGB")


def export_image(source: str | bytes | ImagePart, fmt: ExportFormat) -> DownloadArtifact:
    """
    Redraw the displayed image at its natural size and encode it.

    Args:
        source: Data URI, raw bytes or ImagePart of the displayed result
        fmt: "png" or "jpeg"

    Returns:
        DownloadArtifact named generated-model.<fmt>

    Raises:
        DownloadPreparationError: if the image cannot be decoded or encoded
    """
    if fmt not in ("png", "jpeg"):
        raise DownloadPreparationError(f"Unsupported export format: {fmt}")

    try:
        img = _load(source)

        buffer = io.BytesIO()
        if fmt == "jpeg":
            flatten_on_white(img).save(buffer, format="JPEG", quality=JPEG_QUALITY)
        else:
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA")
            img.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"Failed to prepare image for download: {e}")
        raise DownloadPreparationError(
            "An error occurred while preparing the image for download."
        ) from e

    return DownloadArtifact(
        filename=download_filename(fmt),
        mime_type=f"image/{fmt}",
        data=buffer.getvalue(),
    )
