"""Result area state machine: idle -> loading -> success | error.

Controls (spinner, generate button, download) are derived from the state,
so combinations like "download enabled while loading" cannot be built.
"""

from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.panel import Panel

from ..exceptions import IllegalTransition
from ..models.generation import GenerationResult

GENERIC_ERROR = (
    "An error occurred while generating the image. Please check the console for details."
)
NO_IMAGE_ERROR = (
    "The model did not return an image. Please try adjusting your prompt or images."
)
DOWNLOAD_ERROR = "An error occurred while preparing the image for download."
MISSING_PRODUCT_ALERT = "Please upload a product image."

PLACEHOLDER = "Your generated image will appear here."


class UIState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ViewState:
    """Immutable snapshot of the result area. Use the transition functions."""

    state: UIState = UIState.IDLE
    result: GenerationResult | None = None
    error_message: str | None = None

    def __post_init__(self):
        if (self.state is UIState.SUCCESS) != (self.result is not None and self.result.succeeded):
            raise IllegalTransition("A result image is shown only in the success state")
        if (self.state is UIState.ERROR) != (self.error_message is not None):
            raise IllegalTransition("An error message is shown only in the error state")

    @property
    def spinner_visible(self) -> bool:
        return self.state is UIState.LOADING

    @property
    def generate_enabled(self) -> bool:
        return self.state is not UIState.LOADING

    @property
    def download_enabled(self) -> bool:
        return self.state is UIState.SUCCESS

    @property
    def placeholder_visible(self) -> bool:
        return self.state is UIState.IDLE

    @property
    def image_data_uri(self) -> str | None:
        return self.result.image_data_uri if self.result else None

    @property
    def text(self) -> str | None:
        return self.result.text if self.result else None


def idle() -> ViewState:
    return ViewState()


def start(view: ViewState) -> ViewState:
    """Generate clicked. Clears any previous success or error display."""
    if view.state is UIState.LOADING:
        raise IllegalTransition("A generation is already in flight")
    return ViewState(state=UIState.LOADING)


def success(view: ViewState, result: GenerationResult) -> ViewState:
    if view.state is not UIState.LOADING:
        raise IllegalTransition(f"Cannot succeed from {view.state.value}")
    if not result.succeeded:
        return failure(view, NO_IMAGE_ERROR)
    return ViewState(state=UIState.SUCCESS, result=result)


def failure(view: ViewState, message: str) -> ViewState:
    """
    Move to the error state.

    Allowed from loading (generation failed) and from success (the
    download could not be prepared).
    """
    if view.state not in (UIState.LOADING, UIState.SUCCESS):
        raise IllegalTransition(f"Cannot fail from {view.state.value}")
    return ViewState(state=UIState.ERROR, error_message=message)


def render(view: ViewState, console: Console) -> None:
    """Draw the result area."""
    if view.state is UIState.IDLE:
        console.print(f"[dim]{PLACEHOLDER}[/dim]")
    elif view.state is UIState.LOADING:
        console.print("[blue][Studio][/blue] Generating image...")
    elif view.state is UIState.SUCCESS:
        image = view.result.image
        console.print(
            f"[green][OK][/green] Image generated "
            f"[dim]({image.mime_type}, {len(image.data) / 1024:.1f} KB)[/dim]"
        )
        if view.text:
            console.print(Panel(view.text, title="Model notes", border_style="dim"))
    else:
        console.print(Panel(view.error_message, title="Error", border_style="red"))
