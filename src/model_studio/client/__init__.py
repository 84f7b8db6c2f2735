"""Client side of the studio: intake, transport, UI state and session."""

from .intake import FileSlots, Preview, load_upload
from .session import StudioSession
from .state import UIState, ViewState
from .transport import DirectTransport, HttpUploadTransport

__all__ = [
    "FileSlots",
    "Preview",
    "load_upload",
    "StudioSession",
    "UIState",
    "ViewState",
    "DirectTransport",
    "HttpUploadTransport",
]
