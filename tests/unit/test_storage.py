"""
Unit tests for the storage layer.

Tests cover:
1. Memory and SQLite backends (get/set/remove/range)
2. Transactions (commit, discard, overlay reads)
3. Prefixed namespaces
"""

import pytest

from openbid.core.storage import (
    MemoryStorage,
    SQLiteStorage,
    StorageTransaction,
    PrefixedStorage,
    to_length_prefixed,
    prefix_upper_bound,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    """Each backend must behave identically."""
    if request.param == "memory":
        yield MemoryStorage()
        return
    store = SQLiteStorage(tmp_path / "kv.db")
    yield store
    store.close()


# =============================================================================
# Backend Tests
# =============================================================================


class TestBackends:
    """Tests shared by all backends."""

    def test_get_missing(self, storage):
        """Absent keys read as None."""
        assert storage.get(b"missing") is None

    def test_set_and_get(self, storage):
        storage.set(b"key", b"value")
        assert storage.get(b"key") == b"value"

    def test_overwrite(self, storage):
        storage.set(b"key", b"one")
        storage.set(b"key", b"two")
        assert storage.get(b"key") == b"two"

    def test_remove(self, storage):
        storage.set(b"key", b"value")
        storage.remove(b"key")
        assert storage.get(b"key") is None

        # Removing again is a no-op
        storage.remove(b"key")

    def test_range_ascending(self, storage):
        """Range yields keys in ascending byte order."""
        for key in (b"c", b"a", b"b", b"ab"):
            storage.set(key, key.upper())

        assert [k for k, _ in storage.range()] == [b"a", b"ab", b"b", b"c"]

    def test_range_bounds(self, storage):
        """Start is inclusive, end is exclusive."""
        for key in (b"a", b"b", b"c", b"d"):
            storage.set(key, b"x")

        assert [k for k, _ in storage.range(b"b", b"d")] == [b"b", b"c"]
        assert [k for k, _ in storage.range(start=b"c")] == [b"c", b"d"]
        assert [k for k, _ in storage.range(end=b"b")] == [b"a"]

    def test_range_allows_writes(self, storage):
        """Writing while iterating must not break the iteration."""
        for key in (b"a", b"b"):
            storage.set(key, b"1")

        for key, _ in storage.range():
            storage.set(key, b"2")

        assert storage.get(b"a") == b"2"
        assert storage.get(b"b") == b"2"

    def test_write_batch(self, storage):
        storage.set(b"gone", b"x")
        storage.write_batch([(b"new", b"1"), (b"gone", None)])

        assert storage.get(b"new") == b"1"
        assert storage.get(b"gone") is None


def test_sqlite_persists_across_instances(tmp_path):
    """Data written by one SQLiteStorage is visible to the next."""
    path = tmp_path / "nested" / "kv.db"

    first = SQLiteStorage(path)
    first.set(b"key", b"value")
    first.close()

    second = SQLiteStorage(path)
    assert second.get(b"key") == b"value"
    second.close()


# =============================================================================
# Transaction Tests
# =============================================================================


class TestStorageTransaction:
    """Tests for write buffering."""

    def test_writes_invisible_until_commit(self):
        base = MemoryStorage()
        txn = StorageTransaction(base)

        txn.set(b"key", b"value")

        assert txn.get(b"key") == b"value"
        assert base.get(b"key") is None

        txn.commit()
        assert base.get(b"key") == b"value"

    def test_discard(self):
        base = MemoryStorage()
        base.set(b"key", b"old")
        txn = StorageTransaction(base)

        txn.set(b"key", b"new")
        txn.remove(b"other")
        txn.discard()

        assert txn.pending_writes == 0
        assert base.get(b"key") == b"old"

    def test_remove_shadows_base(self):
        base = MemoryStorage()
        base.set(b"key", b"value")
        txn = StorageTransaction(base)

        txn.remove(b"key")

        assert txn.get(b"key") is None
        assert base.get(b"key") == b"value"

    def test_range_merges_pending(self):
        """Range reflects buffered sets and removes over the base."""
        base = MemoryStorage()
        for key in (b"a", b"b", b"c"):
            base.set(key, b"base")

        txn = StorageTransaction(base)
        txn.remove(b"b")
        txn.set(b"c", b"txn")
        txn.set(b"bb", b"txn")
        txn.set(b"z", b"outside")

        assert list(txn.range(b"a", b"d")) == [
            (b"a", b"base"),
            (b"bb", b"txn"),
            (b"c", b"txn"),
        ]

    def test_context_manager_commits(self):
        base = MemoryStorage()

        with StorageTransaction(base) as txn:
            txn.set(b"key", b"value")

        assert base.get(b"key") == b"value"

    def test_context_manager_discards_on_error(self):
        """An exception leaves the base untouched and propagates."""
        base = MemoryStorage()

        with pytest.raises(RuntimeError):
            with StorageTransaction(base) as txn:
                txn.set(b"key", b"value")
                raise RuntimeError("boom")

        assert base.get(b"key") is None

    def test_commit_to_sqlite(self, tmp_path):
        base = SQLiteStorage(tmp_path / "kv.db")

        with StorageTransaction(base) as txn:
            txn.set(b"a", b"1")
            txn.set(b"b", b"2")

        assert list(base.range()) == [(b"a", b"1"), (b"b", b"2")]
        base.close()


# =============================================================================
# Prefix Tests
# =============================================================================


class TestPrefixedStorage:
    """Tests for namespace isolation."""

    def test_length_prefix(self):
        assert to_length_prefixed(b"bids") == b"\x00\x04bids"

    def test_prefix_upper_bound(self):
        assert prefix_upper_bound(b"ab") == b"ac"
        assert prefix_upper_bound(b"a\xff") == b"b"
        assert prefix_upper_bound(b"\xff\xff") is None

    def test_namespaces_isolated(self):
        base = MemoryStorage()
        one = PrefixedStorage(base, b"one")
        two = PrefixedStorage(base, b"two")

        one.set(b"key", b"1")
        two.set(b"key", b"2")

        assert one.get(b"key") == b"1"
        assert two.get(b"key") == b"2"
        assert base.get(b"\x00\x03onekey") == b"1"

    def test_range_strips_prefix(self):
        base = MemoryStorage()
        store = PrefixedStorage(base, b"ns")
        other = PrefixedStorage(base, b"ns2")

        store.set(b"b", b"2")
        store.set(b"a", b"1")
        other.set(b"a", b"x")

        assert list(store.range()) == [(b"a", b"1"), (b"b", b"2")]
        assert list(store.range(start=b"b")) == [(b"b", b"2")]

    def test_remove(self):
        base = MemoryStorage()
        store = PrefixedStorage(base, b"ns")

        store.set(b"a", b"1")
        store.remove(b"a")

        assert store.get(b"a") is None
        assert list(base.range()) == []
