"""Dataset exceptions: loading, record validation, broken parent links."""

from .base import CyberdocTreeError


class DatasetError(CyberdocTreeError):
    """Base class for dataset-related errors."""

    pass


class DatasetLoadError(DatasetError):
    """Raised when the raw dataset cannot be fetched or decoded."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Cannot load dataset: {source}",
            details={"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason


class InvalidRecordError(DatasetError):
    """Raised when a raw record has the wrong shape."""

    def __init__(self, position: int, field: str, reason: str):
        super().__init__(
            f"Invalid record at position {position}",
            details={"position": str(position), "field": field, "reason": reason},
        )
        self.position = position
        self.field = field
        self.reason = reason


class MissingParentError(DatasetError):
    """Raised when an entry's parent id is not present in the dataset."""

    def __init__(self, index: int, base: int):
        super().__init__(
            f"Entry {index} references missing parent {base}",
            details={"index": str(index), "base": str(base)},
        )
        self.index = index
        self.base = base
