"""CLI for model-studio - E-commerce model photos from product images."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from .client import state as ui
from .client.session import StudioSession
from .client.transport import DirectTransport, HttpUploadTransport
from .exceptions import ConfigurationError
from .models.generation import DEFAULT_ASPECT_RATIO, SUPPORTED_ASPECT_RATIOS

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def _build_transport(server: str, direct: bool, timeout: float):
    if not direct:
        return HttpUploadTransport(base_url=server, timeout=timeout)

    from .api.config import settings
    from .services.gemini_client import GeminiImageGenerator

    generator = GeminiImageGenerator(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
    )
    return DirectTransport(generator, model=settings.GEMINI_MODEL)


@app.command()
def generate(
    product: Path = typer.Argument(..., help="Path to the product image"),
    pose: Path | None = typer.Option(
        None, "--pose", "-p", help="Path to a pose reference image"
    ),
    prompt: str = typer.Option("", "--prompt", help="Context for the shoot (default prompt if empty)"),
    aspect_ratio: str = typer.Option(
        DEFAULT_ASPECT_RATIO, "--aspect-ratio", "-a", help="Aspect ratio, e.g. 1:1 or 16:9"
    ),
    server: str = typer.Option(
        "http://localhost:8000", "--server", "-s", help="Model Studio server URL"
    ),
    direct: bool = typer.Option(
        False, "--direct", help="Call Gemini directly instead of the server (needs GEMINI_API_KEY)"
    ),
    output: Path = typer.Option(Path("outputs"), "--output", "-o", help="Output directory"),
    fmt: str = typer.Option("png", "--format", "-f", help="Download format: png or jpeg"),
    timeout: float = typer.Option(180.0, "--timeout", help="HTTP timeout in seconds"),
):
    """
    Generate an e-commerce model photo from a product image.

    Examples:
        model-studio generate shirt.png
        model-studio generate shirt.png --pose pose.jpg --prompt "Street style, golden hour"
        model-studio generate shirt.png -a 16:9 -f jpeg --direct
    """
    if fmt not in ("png", "jpeg"):
        console.print(f"[red][X] Error:[/red] Format '{fmt}' not valid. Use 'png' or 'jpeg'.")
        raise typer.Exit(1)

    if aspect_ratio not in SUPPORTED_ASPECT_RATIOS:
        console.print(f"[red][X] Error:[/red] Aspect ratio '{aspect_ratio}' not valid.")
        console.print(f"Available: {', '.join(SUPPORTED_ASPECT_RATIOS)}")
        raise typer.Exit(1)

    for path in (product, pose):
        if path is not None and not path.exists():
            console.print(f"[red][X] Error:[/red] File not found: {path}")
            raise typer.Exit(1)

    try:
        transport = _build_transport(server, direct, timeout)
    except ConfigurationError as e:
        console.print(f"[red][X] Error:[/red] {e}")
        raise typer.Exit(1)

    session = StudioSession(
        transport,
        on_change=lambda view: ui.render(view, console),
        on_alert=lambda message: console.print(f"[yellow][!] {message}[/yellow]"),
    )

    for role, path in (("product", product), ("pose", pose)):
        preview = session.select_file(role, path)
        console.print(f"[dim]   {role.capitalize()}: {preview.describe()}[/dim]")

    view = asyncio.run(session.generate(user_prompt=prompt, aspect_ratio=aspect_ratio))
    if view.state is not ui.UIState.SUCCESS:
        raise typer.Exit(1)

    artifact = session.download(fmt)
    if artifact is None:
        raise typer.Exit(1)

    saved = artifact.save(output)
    console.print(f"[green][OK][/green] Saved: {saved}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Server host"),
    port: int = typer.Option(8000, "--port", "-p", help="Server port"),
    reload: bool = typer.Option(False, "--reload", help="Hot reload for development"),
):
    """
    Start the Model Studio API server.

    Examples:
        model-studio serve                 # localhost:8000
        model-studio serve --port 3001     # custom port
        model-studio serve --reload        # with hot reload
    """
    import uvicorn

    console.print("\n[bold]Model Studio API Server[/bold]")
    console.print(f"  URL: http://{host}:{port}")
    console.print(f"  Docs: http://{host}:{port}/docs")
    console.print(f"  Reload: {'Yes' if reload else 'No'}")
    console.print()

    uvicorn.run(
        "model_studio.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


def version_callback(value: bool):
    """Print the version and exit."""
    if value:
        from . import __version__

        console.print(f"Model Studio v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """Generate e-commerce model photographs from product images."""
    load_dotenv()
