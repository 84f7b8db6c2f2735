"""Request-scoped models for a single generation."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from .parts import ImagePart, Part, TextPart

FileRole = Literal["product", "pose"]
ExportFormat = Literal["png", "jpeg"]

DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_ASPECT_RATIO = "1:1"

# Ratios accepted by Gemini image models
SUPPORTED_ASPECT_RATIOS = (
    "1:1",
    "2:3",
    "3:2",
    "3:4",
    "4:3",
    "4:5",
    "5:4",
    "9:16",
    "16:9",
    "21:9",
)


class UploadedFile(BaseModel):
    """A file picked for one of the two roles."""

    role: FileRole
    filename: str = Field(default="", description="Original filename")
    mime_type: str = Field(..., description="Declared MIME type")
    data: bytes = Field(..., description="Raw file bytes")

    @property
    def size(self) -> int:
        return len(self.data)

    def to_part(self) -> ImagePart:
        """Convert to the inline representation the model expects."""
        return ImagePart(mime_type=self.mime_type, data=self.data)


class RequestDraft(BaseModel):
    """Current selections at the moment generate is triggered."""

    product: UploadedFile | None = None
    pose: UploadedFile | None = None
    user_prompt: str = ""
    aspect_ratio: str = DEFAULT_ASPECT_RATIO


class GenerationRequest(BaseModel):
    """
    Ordered parts sent to the model.

    Layout is always [instruction text, product image, pose image?].
    """

    model: str = DEFAULT_MODEL
    parts: list[Part]
    aspect_ratio: str = DEFAULT_ASPECT_RATIO

    @model_validator(mode="after")
    def _check_layout(self) -> "GenerationRequest":
        if len(self.parts) not in (2, 3):
            raise ValueError("A generation request carries 2 or 3 parts")
        if not isinstance(self.parts[0], TextPart):
            raise ValueError("The first part must be the instruction text")
        if not all(isinstance(p, ImagePart) for p in self.parts[1:]):
            raise ValueError("Only image parts may follow the instruction")
        return self

    @property
    def instruction(self) -> str:
        return self.parts[0].text

    @property
    def has_pose(self) -> bool:
        return len(self.parts) == 3


class GenerationResult(BaseModel):
    """What came back from the model."""

    image: ImagePart | None = None
    text: str | None = None

    @property
    def succeeded(self) -> bool:
        # Text without an image is still a failure
        return self.image is not None

    @property
    def image_data_uri(self) -> str | None:
        return self.image.to_data_uri() if self.image else None
