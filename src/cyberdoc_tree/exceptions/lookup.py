"""Lookup exceptions: unknown names, unknown ids, index not built yet."""

from typing import Union

from .base import CyberdocTreeError


class LookupFailure(CyberdocTreeError):
    """Base class for query-time resolution errors."""

    pass


class NotFoundError(LookupFailure):
    """Raised when a name or id does not resolve to an entry."""

    def __init__(self, kind: str, key: Union[str, int]):
        super().__init__(f"Unknown {kind}: {key}", details={"kind": kind, "key": str(key)})
        self.kind = kind
        self.key = key


class IndexNotReadyError(LookupFailure):
    """Raised when a query runs before the first dataset load."""

    def __init__(self) -> None:
        super().__init__("Hierarchy index has not been built yet")
