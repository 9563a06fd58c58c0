"""Asynchronous dataset provider.

Returns the flat record list from the cache when present, otherwise loads it
from the configured source (an http(s) URL or a local JSON file). Loaded
records go to the cache straight away, or once the caller has validated them.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import httpx

from .cache import DatasetCache
from .config import TreeConfig
from .exceptions import DatasetLoadError, InvalidRecordError
from .logging_config import get_logger

logger = get_logger(__name__)


class DatasetProvider:
    """Fetches raw ``{index, base, name}`` records for a session.

    Args:
        config: Source, cache key and timeout settings
        cache: Cache to consult before loading; built from ``config`` if omitted
    """

    def __init__(self, config: TreeConfig, cache: Optional[DatasetCache] = None):
        self.config = config
        self.cache = cache or DatasetCache(
            cache_dir=config.cache_dir,
            ttl_seconds=config.cache_ttl_seconds,
            enabled=config.cache_enabled,
        )
        self.last_from_cache = False

    async def fetch(self, force: bool = False, remember: bool = True) -> list[dict[str, Any]]:
        """Return the raw record list.

        Args:
            force: Skip the cache lookup and reload from the source
            remember: Write records loaded from the source to the cache. Callers
                that validate the records first pass ``False`` and call
                :meth:`remember` once validation succeeds.

        Raises:
            DatasetLoadError: If the source cannot be read or decoded
            InvalidRecordError: If the document is not a JSON array
        """
        key = self.config.cache_key
        if not force:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Using cached dataset '{key}' ({len(cached)} records)")
                self.last_from_cache = True
                return cached

        if self.config.is_remote:
            text = await self._download(self.config.source)
        else:
            text = await asyncio.to_thread(self._read_file, Path(self.config.source))

        records = _decode(self.config.source, text)
        self.last_from_cache = False
        if remember:
            self.remember(records)
        logger.info(f"Loaded {len(records)} records from {self.config.source}")
        return records

    def remember(self, records: list[dict[str, Any]]) -> None:
        """Store ``records`` under the configured cache key."""
        self.cache.set(self.config.cache_key, records)

    def forget(self) -> None:
        """Drop the cached dataset so the next fetch goes to the source."""
        self.cache.delete(self.config.cache_key)

    async def _download(self, url: str) -> str:
        logger.info(f"Downloading dataset from {url}")
        try:
            async with httpx.AsyncClient(timeout=self.config.fetch_timeout_seconds) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise DatasetLoadError(url, str(e)) from e

    @staticmethod
    def _read_file(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise DatasetLoadError(str(path), e.strerror or str(e)) from e


def _decode(source: str, text: str) -> list[dict[str, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DatasetLoadError(source, f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise InvalidRecordError(0, "<document>", "expected a JSON array of records")
    return data
