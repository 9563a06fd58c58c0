"""``cyberdoc-tree serve``: JSON API over the hierarchy index."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import CyberdocTreeError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to listen on"),
    host: Optional[str] = typer.Option(None, help="Host to bind to"),
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="Dataset JSON file or http(s) URL"
    ),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
) -> None:
    """Serve roots, subtree traces and routes over HTTP."""
    try:
        from ..server import _check_deps

        _check_deps()
    except ImportError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    import uvicorn

    from ..server.app import create_app
    from ..session import HierarchySession

    setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config, source=source, verbose=verbose, quiet=quiet, host=host, port=port
        )
    except CyberdocTreeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    session = HierarchySession(settings)
    url = f"http://{settings.host}:{settings.port}"
    console.print(f"[bold]Dataset[/bold] {settings.source}")
    console.print(f"[bold]API[/bold] → [link={url}/api/roots]{url}/api/roots[/link]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    asgi_app = create_app(session)
    try:
        uvicorn.run(
            asgi_app,
            host=settings.host,
            port=settings.port,
            log_level="info" if verbose else ("error" if quiet else "warning"),
        )
    except KeyboardInterrupt:
        pass
    finally:
        session.close()
        console.print("\n[dim]Stopped.[/dim]")
