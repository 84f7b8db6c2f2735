"""API schemas for request/response models."""

from pydantic import BaseModel

from ..models.generation import GenerationResult


class UploadResponse(BaseModel):
    """Successful generation."""

    image: str  # data URI
    text: str | None = None

    @classmethod
    def from_result(cls, result: GenerationResult) -> "UploadResponse":
        return cls(image=result.image_data_uri, text=result.text)


class ErrorResponse(BaseModel):
    """Failed upload or generation."""

    error: str


class MessageResponse(BaseModel):
    """Protocol-level rejection (e.g. wrong method)."""

    message: str
