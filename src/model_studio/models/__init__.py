"""Data models for the studio."""

from .generation import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_MODEL,
    SUPPORTED_ASPECT_RATIOS,
    ExportFormat,
    FileRole,
    GenerationRequest,
    GenerationResult,
    RequestDraft,
    UploadedFile,
)
from .parts import ImagePart, Part, TextPart

__all__ = [
    "TextPart",
    "ImagePart",
    "Part",
    "FileRole",
    "ExportFormat",
    "UploadedFile",
    "RequestDraft",
    "GenerationRequest",
    "GenerationResult",
    "DEFAULT_MODEL",
    "DEFAULT_ASPECT_RATIO",
    "SUPPORTED_ASPECT_RATIOS",
]
