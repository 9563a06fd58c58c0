"""Data models for the hierarchy browser.

An ``Entry`` is one node of the flat dataset; a ``TreemapTrace`` is what a
subtree query hands to the treemap renderer.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional

# Renderer defaults carried alongside every trace.
TREEMAP_TRACE_DEFAULTS: dict[str, Any] = {
    "type": "treemap",
    "hoverinfo": "skip",
    "textfont": {"color": "white"},
    "tiling": {"squarifyratio": 1.618034},
}


@dataclass(frozen=True)
class Entry:
    """One node in the hierarchy.

    ``base`` is ``None`` for top-level entries. ``ancestors`` is filled in by
    the index build and holds every id on the walk from ``base`` to the top.
    """

    index: int
    base: Optional[int]
    name: str
    ancestors: frozenset[int] = field(default_factory=frozenset, compare=False)

    @property
    def name_lower(self) -> str:
        return self.name.lower()

    @property
    def is_top_level(self) -> bool:
        return self.base is None

    def with_ancestors(self, ancestors: frozenset[int]) -> Entry:
        return Entry(self.index, self.base, self.name, ancestors)

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "base": self.base, "name": self.name}


@dataclass
class TreemapTrace:
    """Parallel, index-aligned node sequences for a treemap renderer.

    Position ``i`` of ``ids``, ``labels`` and ``parents`` describes one node.
    ``level`` is the id the renderer should initially zoom to, or ``None`` for
    the full view.
    """

    ids: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    parents: list[str] = field(default_factory=list)
    level: Optional[str] = None

    def __len__(self) -> int:
        return len(self.ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ids": list(self.ids),
            "labels": list(self.labels),
            "parents": list(self.parents),
            "level": self.level,
        }

    def to_plotly(self) -> dict[str, Any]:
        """Return the trace merged with the renderer defaults."""
        trace = copy.deepcopy(TREEMAP_TRACE_DEFAULTS)
        trace.update(self.to_dict())
        return trace
