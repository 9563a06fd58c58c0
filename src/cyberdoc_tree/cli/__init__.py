"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="cyberdoc-tree",
    help="cyberdoc-tree - Browse a class hierarchy as a treemap",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"cyberdoc-tree {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Browse a flat (index, base, name) dataset as a hierarchy."""


# Import subcommands to register them
from .browse import roots as _roots, tree as _tree, route as _route  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402
from .serve import serve as _serve  # noqa: F401, E402
