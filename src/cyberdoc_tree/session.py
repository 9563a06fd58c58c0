"""Session state: the current hierarchy index and its rebuild-on-refresh.

A load fetches the dataset, builds a complete new index off to the side and
then publishes it with a single reference swap, so a concurrent reader sees
either the old index or the new one, never a mix.
"""

from __future__ import annotations

import threading
from typing import Optional, Sequence

from .config import TreeConfig
from .exceptions import DatasetError, IndexNotReadyError
from .index import HierarchyIndex
from .logging_config import get_logger
from .models import Entry, TreemapTrace
from .provider import DatasetProvider
from .query import HierarchyQuery
from .store import RecordStore

logger = get_logger(__name__)


class HierarchySession:
    """Owns the index for one application session.

    Thread-safe: :meth:`load` may run on an event loop while server handlers
    or other threads call the query methods.
    """

    def __init__(self, config: TreeConfig, provider: Optional[DatasetProvider] = None):
        self.config = config
        self.provider = provider or DatasetProvider(config)
        self._lock = threading.RLock()
        self._query: Optional[HierarchyQuery] = None
        self._generation = 0

    async def load(self, force: bool = False) -> HierarchyIndex:
        """Fetch the dataset and publish a freshly built index.

        The records are cached only after the index has been built from them,
        and a cached copy that fails to build is evicted.

        Args:
            force: Bypass the dataset cache

        Returns:
            The newly published index

        Raises:
            DatasetError: If the dataset cannot be loaded or fails validation
        """
        records = await self.provider.fetch(force=force, remember=False)
        try:
            index = self.replace(RecordStore.from_records(records))
        except DatasetError:
            if self.provider.last_from_cache:
                logger.warning("Cached dataset is invalid, evicting it")
                self.provider.forget()
            raise
        if not self.provider.last_from_cache:
            self.provider.remember(records)
        return index

    def replace(self, store: RecordStore) -> HierarchyIndex:
        """Build an index from ``store`` and swap it in."""
        index = HierarchyIndex.build(store)
        query = HierarchyQuery(index, empty_match_policy=self.config.empty_match_policy)
        with self._lock:
            self._query = query
            self._generation += 1
            generation = self._generation
        logger.debug(f"Published index generation {generation} ({len(index)} entries)")
        return index

    @property
    def ready(self) -> bool:
        with self._lock:
            return self._query is not None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def query(self) -> HierarchyQuery:
        with self._lock:
            if self._query is None:
                raise IndexNotReadyError()
            return self._query

    @property
    def index(self) -> HierarchyIndex:
        return self.query.index

    def roots(self) -> tuple[Entry, ...]:
        return self.index.roots

    def subtree(
        self,
        root_name: str,
        filters: Sequence[str] = (),
        path: Optional[Sequence[str]] = None,
    ) -> TreemapTrace:
        return self.query.build_subtree(root_name, filters, path=path)

    def trace(self, path: Sequence[str], filters: Sequence[str] = ()) -> TreemapTrace:
        return self.query.build_trace(path, filters)

    def route(self, index: int) -> str:
        return self.query.build_route(index)

    def route_names(self, index: int) -> list[str]:
        return self.query.route_names(index)

    def close(self) -> None:
        self.provider.cache.close()
