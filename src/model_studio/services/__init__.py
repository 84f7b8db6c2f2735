"""Services: request building, model access, relay and export."""

from .image_export import DownloadArtifact, export_image
from .relay import extract_result, relay_result
from .request_builder import (
    DEFAULT_PROMPT,
    build_from_draft,
    build_generation_request,
)

__all__ = [
    "DEFAULT_PROMPT",
    "build_generation_request",
    "build_from_draft",
    "extract_result",
    "relay_result",
    "DownloadArtifact",
    "export_image",
]
