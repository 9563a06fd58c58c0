"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..cache import DatasetCache
from ..config import TreeConfig
from ..exceptions import CyberdocTreeError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


def _settings(config: Optional[Path], verbose: bool, quiet: bool) -> TreeConfig:
    setup_logging(verbose=verbose, quiet=quiet)
    try:
        return resolve_config(config=config, verbose=verbose, quiet=quiet)
    except CyberdocTreeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _open_cache(settings: TreeConfig) -> DatasetCache:
    return DatasetCache(
        cache_dir=settings.cache_dir,
        ttl_seconds=settings.cache_ttl_seconds,
        enabled=settings.cache_enabled,
    )


@app.command()
def cache_info(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file (TOML)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
):
    """Show cache information and statistics."""
    settings = _settings(config, verbose, quiet)

    with _open_cache(settings) as cache:
        stats = cache.stats()
        cached = cache.get(settings.cache_key)

    console.print("[bold cyan]cyberdoc-tree Cache Info[/bold cyan]")
    console.print()

    if stats.get("enabled"):
        console.print("Status: [green]Enabled[/green]")
        console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
        console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
        console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
        if cached is not None:
            console.print(f"Dataset '{settings.cache_key}': [yellow]{len(cached)} records[/yellow]")
        else:
            console.print(f"Dataset '{settings.cache_key}': [dim]not cached[/dim]")
    else:
        console.print("Status: [red]Disabled[/red]")


@app.command()
def cache_clear(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file (TOML)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
):
    """Clear the dataset cache."""
    settings = _settings(config, verbose, quiet)

    if not settings.cache_enabled:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    with _open_cache(settings) as cache:
        cache.clear()
    console.print("[green]Cache cleared successfully[/green]")
