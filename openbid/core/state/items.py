"""
Typed storage accessors.

Item: a single value stored under a fixed key.
Map: values keyed by identity string under a namespace, iterated in
ascending key order.

Values are JSON encoded with pydantic, so stored bytes match the wire
format of the contract messages.
"""

from typing import Any, Generic, Iterator, Optional, Tuple, TypeVar

from pydantic import TypeAdapter, ValidationError

from openbid.core.errors import NotFound, ParseError
from openbid.core.storage.base import Storage
from openbid.core.storage.transaction import prefix_upper_bound, to_length_prefixed

T = TypeVar("T")


class _Codec(Generic[T]):
    def __init__(self, type_: Any):
        self.adapter = TypeAdapter(type_)
        self.type_name = getattr(type_, "__name__", str(type_))

    def encode(self, value: T) -> bytes:
        return self.adapter.dump_json(value)

    def decode(self, raw: bytes) -> T:
        try:
            return self.adapter.validate_json(raw)
        except ValidationError as e:
            raise ParseError(self.type_name, str(e)) from e


class Item(Generic[T]):
    """A single typed slot."""

    def __init__(self, key: str, type_: Any):
        self.key = key
        self._raw_key = key.encode()
        self._codec = _Codec(type_)

    def save(self, storage: Storage, value: T) -> None:
        storage.set(self._raw_key, self._codec.encode(value))

    def may_load(self, storage: Storage) -> Optional[T]:
        raw = storage.get(self._raw_key)
        if raw is None:
            return None
        return self._codec.decode(raw)

    def load(self, storage: Storage) -> T:
        value = self.may_load(storage)
        if value is None:
            raise NotFound(self._codec.type_name)
        return value

    def exists(self, storage: Storage) -> bool:
        return storage.get(self._raw_key) is not None

    def remove(self, storage: Storage) -> None:
        storage.remove(self._raw_key)

    def __repr__(self) -> str:
        return f"Item({self.key!r})"


class Map(Generic[T]):
    """Typed values keyed by string under a namespace."""

    def __init__(self, namespace: str, type_: Any):
        self.namespace = namespace
        self._prefix = to_length_prefixed(namespace.encode())
        self._codec = _Codec(type_)

    def _key(self, key: str) -> bytes:
        return self._prefix + key.encode()

    def save(self, storage: Storage, key: str, value: T) -> None:
        storage.set(self._key(key), self._codec.encode(value))

    def may_load(self, storage: Storage, key: str) -> Optional[T]:
        raw = storage.get(self._key(key))
        if raw is None:
            return None
        return self._codec.decode(raw)

    def load(self, storage: Storage, key: str) -> T:
        value = self.may_load(storage, key)
        if value is None:
            raise NotFound(self._codec.type_name)
        return value

    def has(self, storage: Storage, key: str) -> bool:
        return storage.get(self._key(key)) is not None

    def remove(self, storage: Storage, key: str) -> None:
        storage.remove(self._key(key))

    def range(self, storage: Storage) -> Iterator[Tuple[str, T]]:
        """Iterate (key, value) in ascending key order."""
        n = len(self._prefix)
        for raw_key, raw in storage.range(self._prefix, prefix_upper_bound(self._prefix)):
            yield raw_key[n:].decode(), self._codec.decode(raw)

    def keys(self, storage: Storage) -> Iterator[str]:
        for key, _ in self.range(storage):
            yield key

    def __repr__(self) -> str:
        return f"Map({self.namespace!r})"
