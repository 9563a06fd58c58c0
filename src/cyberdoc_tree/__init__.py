"""
cyberdoc-tree - hierarchy index and treemap queries over a flat class dataset.

Turns a flat list of ``{index, base, name}`` records into id and name
lookups, ancestor closures, root discovery, filtered subtree traces for a
treemap renderer, and root-first routes.
"""

__version__ = "0.1.0"

from .exceptions import CyberdocTreeError, NotFoundError
from .index import HierarchyIndex
from .models import Entry, TreemapTrace
from .query import HierarchyQuery
from .session import HierarchySession
from .store import RecordStore

__all__ = [
    "RecordStore",
    "HierarchyIndex",
    "HierarchyQuery",
    "HierarchySession",
    "Entry",
    "TreemapTrace",
    "CyberdocTreeError",
    "NotFoundError",
]
