"""Content parts exchanged with the generative model."""

import base64
import binascii
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    """A text part (instruction sent, or commentary returned)."""

    kind: Literal["text"] = "text"
    text: str = Field(..., description="Text content")


class ImagePart(BaseModel):
    """An inline binary image part."""

    kind: Literal["image"] = "image"
    mime_type: str = Field(..., description="MIME type, e.g. image/png")
    data: bytes = Field(..., description="Raw image bytes")

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_uri(self) -> str:
        """Encode as `data:<mime>;base64,<payload>`."""
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    @classmethod
    def from_data_uri(cls, data_uri: str) -> "ImagePart":
        """
        Parse a data URI back into an image part.

        Raises ValueError when the URI is not a base64 data URI.
        """
        if not data_uri.startswith("data:") or "," not in data_uri:
            raise ValueError("Not a data URI")

        header, payload = data_uri.split(",", 1)
        media, _, encoding = header[len("data:") :].partition(";")
        if encoding != "base64":
            raise ValueError("Only base64 data URIs are supported")

        try:
            data = base64.b64decode(payload.strip(), validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e

        return cls(mime_type=media.strip().lower() or "image/png", data=data)


Part = Annotated[TextPart | ImagePart, Field(discriminator="kind")]
