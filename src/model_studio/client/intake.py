"""File intake: the product and pose slots plus their previews."""

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..models.generation import DEFAULT_ASPECT_RATIO, FileRole, RequestDraft, UploadedFile
from ..exceptions import ImageTooLargeError
from ..services.mime import detect_mime_type, guess_mime_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preview:
    """What the preview area shows for one slot."""

    role: FileRole
    filename: str = ""
    width: int | None = None
    height: int | None = None

    @property
    def placeholder(self) -> bool:
        return not self.filename

    def describe(self) -> str:
        if self.placeholder:
            return f"No {self.role} image selected"
        if self.width and self.height:
            return f"{self.filename} ({self.width}x{self.height})"
        return self.filename


def load_upload(path: Path, role: FileRole) -> UploadedFile:
    """Read a file from disk into an UploadedFile."""
    with open(path, "rb") as f:
        data = f.read()
    try:
        mime_type = detect_mime_type(data, path.name)
    except ImageTooLargeError:
        # Sent anyway; the server decides whether to accept it
        logger.warning(f"{path.name} is too large to inspect, using its extension")
        mime_type = guess_mime_type(path.name) or "application/octet-stream"
    return UploadedFile(role=role, filename=path.name, mime_type=mime_type, data=data)


def make_preview(upload: UploadedFile | None, role: FileRole) -> Preview:
    """
    Build the preview for a slot.

    The decoded image is only held long enough to read its size.
    """
    if upload is None:
        return Preview(role=role)

    try:
        with Image.open(io.BytesIO(upload.data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError):
        logger.warning(f"Could not read dimensions of {upload.filename}")
        return Preview(role=role, filename=upload.filename)

    return Preview(role=role, filename=upload.filename, width=width, height=height)


class FileSlots:
    """The two selectable files; a new selection replaces the previous one."""

    def __init__(self):
        self._slots: dict[FileRole, UploadedFile | None] = {"product": None, "pose": None}

    def get(self, role: FileRole) -> UploadedFile | None:
        return self._slots[role]

    def select(self, role: FileRole, path: Path | None) -> Preview:
        """Select a file for a role; None clears the slot."""
        if path is None:
            return self.clear(role)
        self._slots[role] = load_upload(path, role)
        return make_preview(self._slots[role], role)

    def clear(self, role: FileRole) -> Preview:
        self._slots[role] = None
        return Preview(role=role)

    def draft(self, user_prompt: str = "", aspect_ratio: str = DEFAULT_ASPECT_RATIO) -> RequestDraft:
        """Snapshot the current selections into a request draft."""
        return RequestDraft(
            product=self._slots["product"],
            pose=self._slots["pose"],
            user_prompt=user_prompt,
            aspect_ratio=aspect_ratio,
        )
