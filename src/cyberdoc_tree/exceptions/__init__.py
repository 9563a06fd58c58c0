"""Exception hierarchy for cyberdoc-tree."""

from .base import CyberdocTreeError
from .config import ConfigurationError, InvalidConfigError
from .dataset import (
    DatasetError,
    DatasetLoadError,
    InvalidRecordError,
    MissingParentError,
)
from .lookup import IndexNotReadyError, LookupFailure, NotFoundError

__all__ = [
    "CyberdocTreeError",
    "LookupFailure",
    "NotFoundError",
    "IndexNotReadyError",
    "DatasetError",
    "DatasetLoadError",
    "InvalidRecordError",
    "MissingParentError",
    "ConfigurationError",
    "InvalidConfigError",
]
