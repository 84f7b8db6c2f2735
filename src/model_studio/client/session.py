"""Studio session: file slots, generation and download for one user."""

import logging
from collections.abc import Callable
from pathlib import Path

from ..exceptions import (
    DownloadPreparationError,
    IllegalTransition,
    MissingProductError,
    NoImageReturnedError,
)
from ..models.generation import DEFAULT_ASPECT_RATIO, ExportFormat, FileRole
from ..services.image_export import DownloadArtifact, export_image
from . import state as ui
from .intake import FileSlots, Preview
from .transport import Transport

logger = logging.getLogger(__name__)


class StudioSession:
    """
    Drives the result area through its states.

    Only one generation runs at a time: while loading, generate is disabled
    and a second call is rejected by the state machine.
    """

    def __init__(
        self,
        transport: Transport,
        on_change: Callable[[ui.ViewState], None] | None = None,
        on_alert: Callable[[str], None] | None = None,
    ):
        self.transport = transport
        self.slots = FileSlots()
        self.view = ui.idle()
        self.alerts: list[str] = []
        self._on_change = on_change
        self._on_alert = on_alert

    def _set_view(self, view: ui.ViewState) -> None:
        self.view = view
        if self._on_change:
            self._on_change(view)

    def _alert(self, message: str) -> None:
        self.alerts.append(message)
        if self._on_alert:
            self._on_alert(message)

    def select_file(self, role: FileRole, path: Path | None) -> Preview:
        return self.slots.select(role, path)

    async def generate(
        self, user_prompt: str = "", aspect_ratio: str = DEFAULT_ASPECT_RATIO
    ) -> ui.ViewState:
        """
        Run one generation and return the terminal view state.

        Without a product image nothing is sent and the view is unchanged.
        """
        if self.slots.get("product") is None:
            self._alert(ui.MISSING_PRODUCT_ALERT)
            return self.view

        if not self.view.generate_enabled:
            raise IllegalTransition("A generation is already in flight")

        draft = self.slots.draft(user_prompt=user_prompt, aspect_ratio=aspect_ratio)
        loading = ui.start(self.view)
        self._set_view(loading)

        try:
            result = await self.transport.send(draft)
        except MissingProductError:
            self._set_view(ui.idle())
            self._alert(ui.MISSING_PRODUCT_ALERT)
            return self.view
        except NoImageReturnedError:
            logger.warning("Generation finished without an image")
            self._set_view(ui.failure(loading, ui.NO_IMAGE_ERROR))
            return self.view
        except Exception as e:
            logger.error(f"Error generating image: {e}", exc_info=True)
            self._set_view(ui.failure(loading, ui.GENERIC_ERROR))
            return self.view

        self._set_view(ui.success(loading, result))
        return self.view

    def download(self, fmt: ExportFormat = "png") -> DownloadArtifact | None:
        """
        Export the displayed image as PNG or JPEG.

        Returns None (and moves to the error state) if the image cannot be
        prepared.
        """
        if not self.view.download_enabled:
            logger.error("No image available for download.")
            return None

        try:
            return export_image(self.view.result.image, fmt)
        except DownloadPreparationError as e:
            logger.error(f"Failed to load image for downloading: {e}")
            self._set_view(ui.failure(self.view, ui.DOWNLOAD_ERROR))
            return None
