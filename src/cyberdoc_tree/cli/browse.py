"""Query commands: roots, tree and route."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..exceptions import CyberdocTreeError
from ..logging_config import setup_logging
from ..models import TreemapTrace
from . import app
from ._common import console, open_session, resolve_config

_SOURCE_OPTION = typer.Option(
    None, "--source", "-s", help="Dataset JSON file or http(s) URL"
)
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
)
_REFRESH_OPTION = typer.Option(False, "--refresh", help="Ignore the cached dataset")
_NO_CACHE_OPTION = typer.Option(False, "--no-cache", help="Do not read or write the cache")
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")
_QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Suppress logging")


def _fail(logger, exc: Exception, verbose: bool) -> None:
    if isinstance(exc, CyberdocTreeError):
        console.print(f"[red]Error:[/red] {exc}")
    else:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {exc}")
        if verbose:
            console.print_exception()
    raise typer.Exit(1)


@app.command()
def roots(
    source: Optional[str] = _SOURCE_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
    fmt: str = typer.Option("rich", "--format", "-f", help="Output format: rich or json"),
    refresh: bool = _REFRESH_OPTION,
    no_cache: bool = _NO_CACHE_OPTION,
    verbose: bool = _VERBOSE_OPTION,
    quiet: bool = _QUIET_OPTION,
):
    """List top-level entries that have descendants."""
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config, source=source, no_cache=no_cache, verbose=verbose, quiet=quiet
        )
        session = open_session(settings, refresh=refresh)
        try:
            found = session.roots()
            counts = {r.index: len(session.index.descendants_of(r)) - 1 for r in found}
        finally:
            session.close()
    except Exception as e:
        _fail(logger, e, verbose)

    if fmt == "json":
        typer.echo(
            json.dumps([{"index": r.index, "name": r.name, "descendants": counts[r.index]} for r in found])
        )
        return

    table = Table(title="Roots", show_lines=False)
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Descendants", justify="right", style="yellow")
    for r in found:
        table.add_row(str(r.index), escape(r.name), str(counts[r.index]))
    console.print(table)


@app.command()
def tree(
    path: List[str] = typer.Argument(
        ..., help="Navigation path: root name first, zoom target last"
    ),
    filters: Optional[List[str]] = typer.Option(
        None, "--filter", "-f", help="Keep nodes whose name contains this text (repeatable)"
    ),
    fmt: str = typer.Option("rich", "--format", help="Output format: rich or json"),
    source: Optional[str] = _SOURCE_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
    refresh: bool = _REFRESH_OPTION,
    no_cache: bool = _NO_CACHE_OPTION,
    verbose: bool = _VERBOSE_OPTION,
    quiet: bool = _QUIET_OPTION,
):
    """
    Show the subtree under a root, optionally filtered by name.

    [bold cyan]Examples:[/bold cyan]

      cyberdoc-tree tree IScriptable

      cyberdoc-tree tree IScriptable Entity --filter player --format json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config, source=source, no_cache=no_cache, verbose=verbose, quiet=quiet
        )
        session = open_session(settings, refresh=refresh)
        try:
            trace = session.trace(path, filters or [])
        finally:
            session.close()
    except Exception as e:
        _fail(logger, e, verbose)

    if fmt == "json":
        typer.echo(json.dumps(trace.to_dict()))
        return

    if not len(trace):
        console.print("[yellow]No entries match the given filters[/yellow]")
        return
    console.print(_render_tree(trace))
    console.print(f"[dim]{len(trace)} nodes, zoom level {trace.level}[/dim]")


@app.command()
def route(
    index: int = typer.Argument(..., help="Entry index"),
    source: Optional[str] = _SOURCE_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
    refresh: bool = _REFRESH_OPTION,
    no_cache: bool = _NO_CACHE_OPTION,
    verbose: bool = _VERBOSE_OPTION,
    quiet: bool = _QUIET_OPTION,
):
    """Print the root-first path of an entry, e.g. IScriptable/Entity/Player."""
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config, source=source, no_cache=no_cache, verbose=verbose, quiet=quiet
        )
        session = open_session(settings, refresh=refresh)
        try:
            result = session.route(index)
        finally:
            session.close()
    except Exception as e:
        _fail(logger, e, verbose)

    typer.echo(result)


def _render_tree(trace: TreemapTrace) -> Tree:
    """Nest the flat trace into a rich Tree; nodes whose parent is absent hang off the top."""
    ids = set(trace.ids)
    children: dict[str, list[tuple[str, str]]] = {}
    for node_id, label, parent in zip(trace.ids, trace.labels, trace.parents):
        key = parent if parent in ids else ""
        children.setdefault(key, []).append((node_id, label))

    top = Tree("[bold cyan]treemap[/bold cyan]", guide_style="dim")
    stack = [(top, "")]
    seen: set[str] = set()
    while stack:
        branch, parent_id = stack.pop()
        for node_id, label in children.get(parent_id, []):
            if node_id in seen:
                continue
            seen.add(node_id)
            text = escape(label)
            if node_id == trace.level:
                text = f"[bold green]{text}[/bold green]"
            stack.append((branch.add(f"{text} [dim]#{node_id}[/dim]"), node_id))
    return top
