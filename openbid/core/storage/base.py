"""
Storage interface - an ordered, byte-keyed key-value store.

All backends iterate keys in ascending byte order, which is what makes
the highest-bid tie-break deterministic.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, Optional, Tuple

# A pending write: value None removes the key
WriteOp = Tuple[bytes, Optional[bytes]]


class Storage(ABC):
    """Ordered key-value store."""

    @abstractmethod
    def get(self, key: bytes) -> Optional[bytes]:
        """Get value by key, None if absent."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Save a key-value pair."""

    @abstractmethod
    def remove(self, key: bytes) -> None:
        """Delete a key. Removing an absent key is a no-op."""

    @abstractmethod
    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
    ) -> Iterator[Tuple[bytes, bytes]]:
        """Iterate (key, value) pairs with start <= key < end, ascending."""

    def write_batch(self, ops: Iterable[WriteOp]) -> None:
        """Apply a batch of writes. Backends override this to make it atomic."""
        for key, value in ops:
            if value is None:
                self.remove(key)
            else:
                self.set(key, value)


def in_range(key: bytes, start: Optional[bytes], end: Optional[bytes]) -> bool:
    if start is not None and key < start:
        return False
    if end is not None and key >= end:
        return False
    return True


class MemoryStorage(Storage):
    """In-memory backend, used by tests and the demo."""

    def __init__(self):
        self._data: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._data[key] = value

    def remove(self, key: bytes) -> None:
        self._data.pop(key, None)

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
    ) -> Iterator[Tuple[bytes, bytes]]:
        # Snapshot so callers may write while iterating
        items = sorted(
            (k, v) for k, v in self._data.items() if in_range(k, start, end)
        )
        yield from items
