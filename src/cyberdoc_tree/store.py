"""Record store: the flat entry list as loaded from the dataset provider.

The raw dataset encodes "no parent" as ``base == 0``. That sentinel is
rewritten to ``None`` here, once, before any ancestor walk runs; after that
an entry whose own ``index`` is ``0`` is an ordinary node.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from .exceptions import InvalidRecordError
from .logging_config import get_logger
from .models import Entry

logger = get_logger(__name__)

# Raw-data marker for "no parent".
NO_PARENT_SENTINEL = 0


class RecordStore:
    """Immutable, normalized sequence of entries in input order."""

    def __init__(self, entries: Sequence[Entry]):
        self._entries: tuple[Entry, ...] = tuple(entries)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> RecordStore:
        """Validate raw ``{index, base, name}`` records and normalize parents."""
        entries = [_parse_record(position, record) for position, record in enumerate(records)]
        normalized = sum(1 for e in entries if e.base is None)
        logger.debug(f"Loaded {len(entries)} records ({normalized} without parent)")
        return cls(entries)

    @classmethod
    def from_json(cls, text: str) -> RecordStore:
        """Parse a JSON array of raw records."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidRecordError(0, "<document>", f"invalid JSON: {e}") from e
        if not isinstance(data, list):
            raise InvalidRecordError(0, "<document>", "expected a JSON array of records")
        return cls.from_records(data)

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def to_records(self) -> list[dict[str, Any]]:
        """Raw-shaped records, with ``None`` parents written back as the sentinel."""
        return [
            {
                "index": e.index,
                "base": NO_PARENT_SENTINEL if e.base is None else e.base,
                "name": e.name,
            }
            for e in self._entries
        ]


def normalize_base(base: Optional[int]) -> Optional[int]:
    """Map the raw "no parent" sentinel to ``None``."""
    if base is None or base == NO_PARENT_SENTINEL:
        return None
    return base


def _parse_record(position: int, record: Any) -> Entry:
    if not isinstance(record, Mapping):
        raise InvalidRecordError(position, "<record>", "expected an object")

    if "index" not in record:
        raise InvalidRecordError(position, "index", "missing")
    index = record["index"]
    if not _is_int(index):
        raise InvalidRecordError(position, "index", f"expected integer, got {index!r}")

    base = record.get("base")
    if base is not None and not _is_int(base):
        raise InvalidRecordError(position, "base", f"expected integer, got {base!r}")

    name = record.get("name")
    if not isinstance(name, str):
        raise InvalidRecordError(position, "name", f"expected string, got {name!r}")

    if base is not None:
        base = int(base)
    return Entry(index=int(index), base=normalize_base(base), name=name)


def _is_int(value: Any) -> bool:
    # JSON numbers may arrive as integral floats; bools are never ids.
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()
