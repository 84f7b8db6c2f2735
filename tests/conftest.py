"""Pytest configuration and fixtures."""

import io
import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Set test environment
os.environ["ENVIRONMENT"] = "test"

from model_studio.models.parts import ImagePart, TextPart  # noqa: E402


def make_png(size=(32, 32), transparent_right_half: bool = True) -> bytes:
    """Red PNG whose right half is fully transparent."""
    img = Image.new("RGBA", size, (255, 0, 0, 255))
    if transparent_right_half:
        width, height = size
        for x in range(width // 2, width):
            for y in range(height):
                img.putpixel((x, y), (0, 0, 0, 0))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def make_jpeg(size=(8, 8), color=(0, 0, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG")
    return buffer.getvalue()


def make_mpo(size=(16, 16)) -> bytes:
    """Two-frame multi-picture JPEG, as written by many phone cameras."""
    first = Image.new("RGB", size, (0, 128, 0))
    second = Image.new("RGB", size, (0, 0, 128))
    buffer = io.BytesIO()
    first.save(buffer, format="MPO", save_all=True, append_images=[second])
    return buffer.getvalue()


class FakeGenerator:
    """Stands in for GeminiImageGenerator; records every request."""

    def __init__(self, parts=None, error: Exception | None = None):
        self.parts = parts or []
        self.error = error
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return list(self.parts)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def image_files(tmp_path: Path, png_bytes: bytes, jpeg_bytes: bytes) -> dict[str, Path]:
    """A product PNG and a pose JPEG on disk."""
    product = tmp_path / "shirt.png"
    product.write_bytes(png_bytes)
    pose = tmp_path / "pose.jpg"
    pose.write_bytes(jpeg_bytes)
    return {"product": product, "pose": pose}


@pytest.fixture
def model_parts(png_bytes: bytes) -> list:
    """A typical model answer: commentary text plus the generated image."""
    return [
        TextPart(text="Here is your model wearing the shirt."),
        ImagePart(mime_type="image/png", data=png_bytes),
    ]


@pytest.fixture
def fake_generator(monkeypatch, model_parts) -> FakeGenerator:
    """Replace the Gemini generator used by the upload route."""
    generator = FakeGenerator(parts=model_parts)
    monkeypatch.setattr("model_studio.api.routes.upload.get_generator", lambda: generator)
    return generator


@pytest.fixture
def tiny_pixel_limit(monkeypatch):
    """Make Pillow treat any test image bigger than 10x10 as a decompression bomb."""
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 50)
