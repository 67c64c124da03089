"""
Storage wrappers used by the host.

- StorageTransaction buffers writes over a base store so that an
  invocation either commits all of its writes or none of them.
- PrefixedStorage confines a contract to its own key namespace.
"""

from typing import Dict, Iterator, Optional, Tuple

from openbid.core.storage.base import Storage, in_range
from openbid.utils.logger import get_logger

logger = get_logger("storage.transaction")


def to_length_prefixed(namespace: bytes) -> bytes:
    """Encode a namespace as a 2-byte big-endian length followed by its bytes."""
    if len(namespace) > 0xFFFF:
        raise ValueError(f"Namespace too long: {len(namespace)} bytes")
    return len(namespace).to_bytes(2, "big") + namespace


def prefix_upper_bound(prefix: bytes) -> Optional[bytes]:
    """Smallest key greater than every key starting with ``prefix``."""
    data = bytearray(prefix)
    while data:
        if data[-1] < 0xFF:
            data[-1] += 1
            return bytes(data)
        data.pop()
    return None


class StorageTransaction(Storage):
    """
    Write-buffering overlay over a base store.

    Reads see the buffered writes. Use as a context manager: the buffer
    is committed on normal exit and discarded if an exception escapes.
    """

    def __init__(self, base: Storage):
        self.base = base
        self._pending: Dict[bytes, Optional[bytes]] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        if key in self._pending:
            return self._pending[key]
        return self.base.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._pending[key] = value

    def remove(self, key: bytes) -> None:
        self._pending[key] = None

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
    ) -> Iterator[Tuple[bytes, bytes]]:
        merged = dict(self.base.range(start, end))
        for key, value in self._pending.items():
            if not in_range(key, start, end):
                continue
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        for key in sorted(merged):
            yield key, merged[key]

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def commit(self) -> None:
        """Flush buffered writes to the base store as one batch."""
        ops = list(self._pending.items())
        self.base.write_batch(ops)
        self._pending.clear()
        logger.debug(f"Committed {len(ops)} writes")

    def discard(self) -> None:
        """Drop buffered writes."""
        dropped = len(self._pending)
        self._pending.clear()
        logger.debug(f"Discarded {dropped} writes")

    def __enter__(self) -> "StorageTransaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            self.discard()
        return False


class PrefixedStorage(Storage):
    """View of a base store restricted to keys under one namespace."""

    def __init__(self, base: Storage, namespace: bytes):
        self.base = base
        self.prefix = to_length_prefixed(namespace)

    def get(self, key: bytes) -> Optional[bytes]:
        return self.base.get(self.prefix + key)

    def set(self, key: bytes, value: bytes) -> None:
        self.base.set(self.prefix + key, value)

    def remove(self, key: bytes) -> None:
        self.base.remove(self.prefix + key)

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
    ) -> Iterator[Tuple[bytes, bytes]]:
        lower = self.prefix + (start or b"")
        upper = self.prefix + end if end is not None else prefix_upper_bound(self.prefix)
        n = len(self.prefix)
        for key, value in self.base.range(lower, upper):
            yield key[n:], value
