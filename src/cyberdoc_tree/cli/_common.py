"""Shared CLI helpers."""

import asyncio
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import TreeConfig, load_config
from ..session import HierarchySession

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    source: Optional[str] = None,
    no_cache: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    **overrides,
) -> TreeConfig:
    """Build configuration from CLI options."""
    if source is not None:
        overrides["source"] = source
    if no_cache:
        overrides["cache_enabled"] = False
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)


def open_session(settings: TreeConfig, refresh: bool = False) -> HierarchySession:
    """Create a session and build its index from the configured source."""
    session = HierarchySession(settings)
    try:
        asyncio.run(session.load(force=refresh))
    except BaseException:
        session.close()
        raise
    return session
