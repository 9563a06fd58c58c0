"""Hierarchy index: id/name lookups, ancestor closures and root discovery.

Built once from a ``RecordStore`` and never mutated afterwards. A refresh
builds a new ``HierarchyIndex`` instead of patching this one.

The ancestor walk follows ``base`` links until it reaches an entry without a
parent. The dataset is assumed acyclic; a parent cycle makes the walk loop
forever.
"""

from __future__ import annotations

import time
from typing import Iterator, Optional

from .exceptions import MissingParentError, NotFoundError
from .logging_config import get_logger
from .models import Entry
from .store import RecordStore

logger = get_logger(__name__)


class HierarchyIndex:
    """Read-only lookup structures derived from one record store.

    Attributes:
        entries: Every entry, in store order, with ``ancestors`` filled in
        by_id: index -> Entry
        by_name_lower: lowercased name -> Entry (last write wins)
        all_ancestor_ids: union of every entry's ancestor set
        roots: top-level entries with at least one descendant, in store order
    """

    def __init__(
        self,
        entries: tuple[Entry, ...],
        by_id: dict[int, Entry],
        by_name_lower: dict[str, Entry],
        all_ancestor_ids: frozenset[int],
    ):
        self.entries = entries
        self.by_id = by_id
        self.by_name_lower = by_name_lower
        self.all_ancestor_ids = all_ancestor_ids
        self.roots: tuple[Entry, ...] = find_roots(entries, all_ancestor_ids)

    @classmethod
    def build(cls, store: RecordStore) -> HierarchyIndex:
        start = time.perf_counter()

        # One entry per id: a repeated index keeps its first position and its
        # last record. Parent lookups need every id resolvable up front.
        latest: dict[int, Entry] = {}
        for raw in store:
            if raw.index in latest:
                logger.warning(
                    f"Duplicate index {raw.index}: '{latest[raw.index].name}' replaced by '{raw.name}'"
                )
            latest[raw.index] = raw
        parent_of: dict[int, Optional[int]] = {i: raw.base for i, raw in latest.items()}

        entries: list[Entry] = []
        by_id: dict[int, Entry] = {}
        by_name_lower: dict[str, Entry] = {}
        all_ancestor_ids: set[int] = set()

        for raw in latest.values():
            entry = raw.with_ancestors(_walk_ancestors(raw, parent_of))
            entries.append(entry)
            by_id[entry.index] = entry
            key = entry.name_lower
            if key in by_name_lower and by_name_lower[key].index != entry.index:
                logger.debug(
                    f"Name collision on '{key}': {by_name_lower[key].index} replaced by {entry.index}"
                )
            by_name_lower[key] = entry
            all_ancestor_ids |= entry.ancestors

        index = cls(tuple(entries), by_id, by_name_lower, frozenset(all_ancestor_ids))
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            f"Built hierarchy index: {len(entries)} entries, {len(index.roots)} roots "
            f"in {elapsed_ms:.1f}ms"
        )
        return index

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __contains__(self, index: object) -> bool:
        return index in self.by_id

    def get(self, index: int) -> Entry:
        """Entry for ``index``; raises ``NotFoundError`` when absent."""
        try:
            return self.by_id[index]
        except KeyError:
            raise NotFoundError("entry id", index) from None

    def find(self, name: str) -> Entry:
        """Entry for ``name`` (case-insensitive); raises ``NotFoundError``."""
        try:
            return self.by_name_lower[name.lower()]
        except KeyError:
            raise NotFoundError("entry name", name) from None

    def lookup(self, name: str) -> Optional[Entry]:
        """Like :meth:`find` but returns ``None`` for unknown names."""
        return self.by_name_lower.get(name.lower())

    def is_root(self, entry: Entry) -> bool:
        return entry.base is None and entry.index in self.all_ancestor_ids

    def descendants_of(self, root: Entry) -> list[Entry]:
        """The root itself plus every entry that has it as an ancestor."""
        return [e for e in self.entries if e.index == root.index or root.index in e.ancestors]


def find_roots(entries: tuple[Entry, ...], all_ancestor_ids: frozenset[int]) -> tuple[Entry, ...]:
    """Top-level entries that are an ancestor of at least one other entry."""
    return tuple(e for e in entries if e.base is None and e.index in all_ancestor_ids)


def _walk_ancestors(entry: Entry, parent_of: dict[int, Optional[int]]) -> frozenset[int]:
    ancestors: set[int] = set()
    child = entry.index
    cursor = entry.base
    while cursor is not None:
        if cursor not in parent_of:
            raise MissingParentError(child, cursor)
        ancestors.add(cursor)
        child, cursor = cursor, parent_of[cursor]
    return frozenset(ancestors)
