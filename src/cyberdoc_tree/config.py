"""Configuration loading and management for cyberdoc-tree.

Configuration sources are merged in priority order:
    1. Defaults (defined in TreeConfig)
    2. Global config (~/.cyberdoc-tree.toml)
    3. Project config (./cyberdoc-tree.toml)
    4. Explicit config file
    5. Environment variables (CYBERDOC_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(source="cyberdoc-api.json", verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
EmptyMatchPolicy = Literal["empty", "unfiltered"]

_VERBOSITIES = ("quiet", "normal", "verbose")
_EMPTY_MATCH_POLICIES = ("empty", "unfiltered")


@dataclass(frozen=True)
class TreeConfig:
    """Configuration for loading and browsing a hierarchy dataset.

    Attributes:
        Dataset:
            source: Local JSON path or http(s) URL of the flat record list
            fetch_timeout_seconds: HTTP timeout when source is a URL

        Caching:
            cache_enabled: Keep fetched datasets in the on-disk cache
            cache_dir: Directory for cache storage
            cache_key: Key the dataset is stored under
            cache_ttl_hours: Cache time-to-live in hours (0 = never expires)

        Queries:
            empty_match_policy: What a filtered subtree query returns when no
                node matches: "empty" (no nodes) or "unfiltered" (full subtree)

        Server:
            host: Bind address for ``serve``
            port: Bind port for ``serve``

        Output control:
            verbosity: Logging verbosity level
    """

    # Dataset
    source: str = "cyberdoc-api.json"
    fetch_timeout_seconds: float = 30.0

    # Caching
    cache_enabled: bool = True
    cache_dir: str = ".cyberdoc-cache"
    cache_key: str = "cyberdoc-api"
    cache_ttl_hours: int = 24

    # Queries
    empty_match_policy: EmptyMatchPolicy = "empty"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.source:
            raise ValueError("source must not be empty")
        if self.fetch_timeout_seconds <= 0:
            raise ValueError("fetch_timeout_seconds must be positive")

        if not self.cache_key:
            raise ValueError("cache_key must not be empty")
        if self.cache_ttl_hours < 0:
            raise ValueError("cache_ttl_hours must be non-negative")

        if self.empty_match_policy not in _EMPTY_MATCH_POLICIES:
            raise ValueError(
                f"empty_match_policy must be one of {', '.join(_EMPTY_MATCH_POLICIES)}"
            )

        if not 0 < self.port < 65536:
            raise ValueError("port must be between 1 and 65535")

        if self.verbosity not in _VERBOSITIES:
            raise ValueError(f"verbosity must be one of {', '.join(_VERBOSITIES)}")

    @property
    def cache_ttl_seconds(self) -> Optional[int]:
        """Get cache TTL in seconds (None when entries never expire)."""
        if self.cache_ttl_hours == 0:
            return None
        return self.cache_ttl_hours * 3600

    @property
    def is_remote(self) -> bool:
        """True when the dataset source is an HTTP(S) URL."""
        return self.source.startswith(("http://", "https://"))


def load_config(config_file: Optional[Path] = None, **overrides) -> TreeConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated TreeConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a merged value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".cyberdoc-tree.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "cyberdoc-tree.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return TreeConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        key = str(e).split(" ", 1)[0]
        raise InvalidConfigError(key, merged.get(key), str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CYBERDOC_* environment variables.

    Every TreeConfig field can be set, e.g. CYBERDOC_SOURCE,
    CYBERDOC_CACHE_ENABLED (true/false/1/0), CYBERDOC_PORT.

    Returns:
        Dict of field_name -> parsed_value for any CYBERDOC_* vars found.
    """
    type_hints = get_type_hints(TreeConfig)

    result: dict[str, Any] = {}

    for field_name in TreeConfig.__dataclass_fields__:
        env_key = f"CYBERDOC_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
