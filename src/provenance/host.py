"""In-process host for the registry.

A ledger normally supplies the caller identity and block height and runs
one transaction at a time. RegistryHost plays that role when the registry is
embedded in an ordinary process: a lock serializes every operation and a
BlockClock provides the logical time.
"""

from __future__ import annotations

import threading

from .models import AuthorStats, ContentRecord
from .registry import ContentRegistry


class BlockClock:
    """Monotonically non-decreasing logical time (block height)."""

    def __init__(self, height: int = 0) -> None:
        if height < 0:
            raise ValueError("height must be non-negative")
        self._height = height

    @property
    def height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move forward by ``blocks`` and return the new height.

        Raises:
            ValueError: If blocks is negative (time never moves backwards)
        """
        if blocks < 0:
            raise ValueError("logical time cannot move backwards")
        self._height += blocks
        return self._height


class RegistryHost:
    """Serializes registry calls and stamps writes with the current height."""

    registry: ContentRegistry
    clock: BlockClock

    def __init__(self, registry: ContentRegistry, clock: BlockClock | None = None) -> None:
        self.registry = registry
        self.clock = clock or BlockClock()
        self._lock = threading.Lock()

    def register(
        self,
        caller: str,
        fingerprint: bytes,
        content_type: str,
        signature: bytes,
        title: str,
        storage_url: str | None = None,
    ) -> bytes:
        """Run register() as one transaction at the current height."""
        with self._lock:
            return self.registry.register(
                fingerprint,
                content_type,
                signature,
                title,
                storage_url,
                caller=caller,
                now=self.clock.height,
            )

    def verify(self, fingerprint: bytes) -> ContentRecord:
        with self._lock:
            return self.registry.verify(fingerprint)

    def get_entry_at(self, author: str, index: int) -> bytes | None:
        with self._lock:
            return self.registry.get_entry_at(author, index)

    def get_stats(self, author: str) -> AuthorStats:
        with self._lock:
            return self.registry.get_stats(author)

    def list_author_content(
        self, author: str, start: int = 0, limit: int | None = None
    ) -> list[bytes]:
        with self._lock:
            return self.registry.list_author_content(author, start, limit)

    def produce_block(self) -> int:
        """Close the current block; later writes see the next height."""
        with self._lock:
            return self.clock.advance()
