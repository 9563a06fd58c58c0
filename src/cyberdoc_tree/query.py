"""Query surface consumed by the rendering layer.

``build_subtree`` turns a root name plus optional name filters into a
``TreemapTrace``; ``build_route`` turns an entry id into its root-first
``/``-joined path. Both run synchronously against an already-built index.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .exceptions import NotFoundError
from .index import HierarchyIndex
from .logging_config import get_logger
from .models import Entry, TreemapTrace

logger = get_logger(__name__)

ROUTE_SEPARATOR = "/"


class HierarchyQuery:
    """Subtree and route queries over one ``HierarchyIndex``.

    Args:
        index: The built index to query
        empty_match_policy: Result of a filtered query that matches no node.
            ``"empty"`` returns a trace without nodes, ``"unfiltered"`` returns
            the full subtree as if no filter had been given.
    """

    def __init__(self, index: HierarchyIndex, empty_match_policy: str = "empty"):
        if empty_match_policy not in ("empty", "unfiltered"):
            raise ValueError(f"Unknown empty_match_policy: {empty_match_policy}")
        self.index = index
        self.empty_match_policy = empty_match_policy

    def build_subtree(
        self,
        root_name: str,
        filters: Sequence[str] = (),
        path: Optional[Sequence[str]] = None,
    ) -> TreemapTrace:
        """Node set rooted at ``root_name``, optionally narrowed by ``filters``.

        A node is kept when its name contains any filter (case-insensitive),
        together with all of its ancestors inside the subtree so the result
        stays connected to the root. ``path`` is the navigation path whose
        last name becomes the initial zoom ``level``.

        Raises:
            NotFoundError: If ``root_name`` is unknown
        """
        root = self.index.find(root_name)
        candidates = self.index.descendants_of(root)

        needles = [f.lower() for f in filters if f and f.strip()]
        if needles:
            selected = self._filter(candidates, needles)
            if not selected and self.empty_match_policy == "unfiltered":
                logger.debug(f"Filters {needles} matched nothing under '{root.name}', showing all")
                selected = candidates
        else:
            selected = candidates

        trace = TreemapTrace(
            ids=[str(e.index) for e in selected],
            labels=[e.name for e in selected],
            parents=["" if e.base is None else str(e.base) for e in selected],
            level=self._resolve_level(root, path),
        )
        logger.debug(
            f"Subtree '{root.name}': {len(candidates)} candidates, {len(trace)} nodes"
        )
        return trace

    def build_trace(self, path: Sequence[str], filters: Sequence[str] = ()) -> TreemapTrace:
        """Subtree for a navigation path: ``path[0]`` is the root, ``path[-1]`` the target."""
        if not path:
            raise NotFoundError("entry name", "")
        return self.build_subtree(path[0], filters, path=path)

    def route_names(self, index: int) -> list[str]:
        """Names from the topmost ancestor down to ``index``, inclusive."""
        entry = self.index.get(index)
        names = [entry.name]
        cursor = entry.base
        while cursor is not None:
            parent = self.index.get(cursor)
            names.insert(0, parent.name)
            cursor = parent.base
        return names

    def build_route(self, index: int) -> str:
        """Root-first ``/``-joined path of names ending at ``index``."""
        return ROUTE_SEPARATOR.join(self.route_names(index))

    def _filter(self, candidates: list[Entry], needles: list[str]) -> list[Entry]:
        in_subtree = {e.index for e in candidates}
        keep: set[int] = set()
        for needle in needles:
            for entry in candidates:
                if entry.index in keep or needle not in entry.name_lower:
                    continue
                keep.add(entry.index)
                keep.update(a for a in entry.ancestors if a in in_subtree)
        return [e for e in candidates if e.index in keep]

    def _resolve_level(self, root: Entry, path: Optional[Sequence[str]]) -> Optional[str]:
        target = self.index.lookup(path[-1]) if path else None
        if target is None:
            target = self.index.lookup(root.name)
        return None if target is None else str(target.index)
