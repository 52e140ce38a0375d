"""Keyed tables and the unit of work that writes them atomically.

The registry keeps its state in several independent KeyValueStore tables.
A registration has to touch three of them; UnitOfWork stages those writes
and commits them as one group so a failure leaves every table untouched.

Usage:
    records: KeyValueStore[bytes, ContentRecord] = KeyValueStore("records")
    stats: KeyValueStore[str, AuthorStats] = KeyValueStore("author_stats")

    uow = UnitOfWork()
    uow.insert(records, fingerprint, record)
    uow.upsert(stats, author, new_stats)
    uow.commit()  # both writes, or neither

Thread-safety: Not thread-safe. Callers must serialize access (see
host.RegistryHost), matching the single-writer ledger model.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyExistsError(KeyError):
    """Raised when put_if_absent targets a key that is already present."""

    def __init__(self, table: str, key: object) -> None:
        self.table = table
        self.key = key
        super().__init__(f"Key already present in '{table}': {key!r}")


class KeyValueStore(Generic[K, V]):
    """In-memory exact-match table.

    Supports get, put-if-absent and upsert. There is no delete: nothing in
    the registry ever removes a key.
    """

    name: str
    _data: dict[K, V]

    def __init__(self, name: str) -> None:
        self.name = name
        self._data = {}

    def get(self, key: K, default: V | None = None) -> V | None:
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def items(self) -> list[tuple[K, V]]:
        """Return a list copy of all (key, value) pairs in insertion order."""
        return list(self._data.items())

    def put_if_absent(self, key: K, value: V) -> None:
        """Insert a new key.

        Raises:
            KeyExistsError: If the key is already present
        """
        if key in self._data:
            raise KeyExistsError(self.name, key)
        self._data[key] = value

    def upsert(self, key: K, value: V) -> None:
        """Insert or replace the value at key."""
        self._data[key] = value

    def snapshot(self) -> dict[K, V]:
        """Shallow copy of the table contents, used for rollback."""
        return dict(self._data)

    def restore(self, snapshot: dict[K, V]) -> None:
        """Replace the table contents with a previous snapshot."""
        self._data = dict(snapshot)


class UnitOfWork:
    """Stages writes across several stores and commits them all-or-nothing.

    Staged inserts are re-checked at commit time: if any target key already
    exists, nothing is written. Application itself is snapshot-and-swap, so an
    unexpected exception mid-commit restores every touched table.
    """

    _ops: list[tuple[str, KeyValueStore, object, object]]
    committed: bool

    def __init__(self) -> None:
        self._ops = []
        self.committed = False

    def insert(self, store: KeyValueStore[K, V], key: K, value: V) -> None:
        """Stage a put-if-absent."""
        self._check_open()
        self._ops.append(("insert", store, key, value))

    def upsert(self, store: KeyValueStore[K, V], key: K, value: V) -> None:
        """Stage an insert-or-replace."""
        self._check_open()
        self._ops.append(("upsert", store, key, value))

    def __len__(self) -> int:
        return len(self._ops)

    def discard(self) -> None:
        """Drop all staged writes without applying them."""
        self._ops.clear()

    def commit(self) -> None:
        """Apply every staged write, or none of them.

        Raises:
            KeyExistsError: If a staged insert collides with an existing key
                (or with another staged insert). No table is modified.
        """
        self._check_open()

        # Pre-flight: all inserts must land on free keys
        pending: set[tuple[int, object]] = set()
        for kind, store, key, _ in self._ops:
            if kind != "insert":
                continue
            marker = (id(store), key)
            if key in store or marker in pending:
                raise KeyExistsError(store.name, key)
            pending.add(marker)

        stores = {id(store): store for _, store, _, _ in self._ops}
        snapshots = {sid: store.snapshot() for sid, store in stores.items()}
        try:
            for kind, store, key, value in self._ops:
                if kind == "insert":
                    store.put_if_absent(key, value)
                else:
                    store.upsert(key, value)
        except Exception:
            logger.error("Commit failed, restoring %d table(s)", len(stores))
            for sid, store in stores.items():
                store.restore(snapshots[sid])
            raise

        self.committed = True
        self._ops.clear()

    def _check_open(self) -> None:
        if self.committed:
            raise RuntimeError("Unit of work already committed")
