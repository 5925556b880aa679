"""Tests for in-memory key store."""

import threading

import pytest

from secretstore.keystore.context import Context, OperationCanceledError
from secretstore.keystore.exceptions import KeyExistsError, KeyNotFoundError
from secretstore.keystore.memory import MemoryKeyStore


@pytest.fixture
def store():
    return MemoryKeyStore()


@pytest.fixture
def ctx():
    return Context.background()


class TestMemoryKeyStore:
    """Tests for MemoryKeyStore."""

    def test_create_and_get(self, store, ctx):
        """Should return exactly the created value."""
        # Arrange
        store.create(ctx, "db-key-1", b"secret-v1")

        # Act
        result = store.get(ctx, "db-key-1")

        # Assert
        assert result == b"secret-v1"

    def test_create_existing_keeps_value(self, store, ctx):
        """Second create raises and leaves the value unmodified."""
        # Arrange
        store.create(ctx, "db-key-1", b"secret-v1")

        # Act & Assert
        with pytest.raises(KeyExistsError):
            store.create(ctx, "db-key-1", b"secret-v2")

        assert store.get(ctx, "db-key-1") == b"secret-v1"

    def test_set_never_overwrites(self, store, ctx):
        """Set behaves like create."""
        # Arrange
        store.set(ctx, "k", b"v1")

        # Act & Assert
        with pytest.raises(KeyExistsError):
            store.set(ctx, "k", b"v2")

    def test_get_missing(self, store, ctx):
        """Get on unknown name raises KeyNotFoundError."""
        with pytest.raises(KeyNotFoundError):
            store.get(ctx, "missing")

    def test_delete_then_get(self, store, ctx):
        """Deleted entries are gone; repeated delete reports not found."""
        # Arrange
        store.create(ctx, "db-key-1", b"secret-v1")

        # Act
        store.delete(ctx, "db-key-1")

        # Assert
        with pytest.raises(KeyNotFoundError):
            store.get(ctx, "db-key-1")
        with pytest.raises(KeyNotFoundError):
            store.delete(ctx, "db-key-1")

    def test_list_with_cursor(self, store, ctx):
        """Listing page by page yields every match once."""
        # Arrange
        for name in ["db-c", "db-a", "web", "db-b"]:
            store.create(ctx, name, b"x")

        # Act
        first, cursor = store.list(ctx, "db-", 1)
        rest, end = store.list(ctx, "db-", -1, cursor)

        # Assert
        assert first == ["db-a"]
        assert cursor
        assert rest == ["db-b", "db-c"]
        assert end == ""

    def test_canceled_context(self, store):
        """Operations on a canceled context raise the cancellation error."""
        # Arrange
        ctx = Context()
        ctx.cancel()

        # Act & Assert
        with pytest.raises(OperationCanceledError):
            store.create(ctx, "k", b"v")

    def test_status(self, store, ctx):
        """Status reports zero latency."""
        assert store.status(ctx).latency == 0.0


class TestMemoryKeyStoreConcurrency:
    """Tests for one store shared by many threads."""

    def test_concurrent_create_same_name(self, store):
        """Exactly one of many racing creates succeeds."""
        # Arrange
        barrier = threading.Barrier(16)
        outcomes = []

        def create(i):
            barrier.wait()
            try:
                store.create(Context.background(), "shared", f"v{i}".encode())
                outcomes.append("created")
            except KeyExistsError:
                outcomes.append("exists")

        # Act
        threads = [threading.Thread(target=create, args=(i,)) for i in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert outcomes.count("created") == 1
        assert outcomes.count("exists") == 15

    def test_concurrent_create_distinct_names(self, store):
        """Racing creates of different names all land."""
        # Arrange
        barrier = threading.Barrier(16)

        def create(i):
            barrier.wait()
            store.create(Context.background(), f"key-{i:02d}", b"v")

        # Act
        threads = [threading.Thread(target=create, args=(i,)) for i in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        names, cursor = store.list(Context.background())
        assert names == [f"key-{i:02d}" for i in range(16)]
        assert cursor == ""
