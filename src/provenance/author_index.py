"""Per-author counters and the paginated (author, sequence) index.

Each author's fingerprints are numbered 0, 1, 2, ... in registration order.
The entry at sequence ``i`` is written by the author's ``i``-th successful
registration and never reassigned, so the range ``[0, content_count)`` is
always gap-free and clients can page through it with plain integer offsets.
"""

from __future__ import annotations

from .constants import DEFAULT_PAGE_SIZE
from .models import AuthorStats
from .store import KeyValueStore, UnitOfWork

_ZERO_STATS = AuthorStats()


class AuthorIndex:
    """Author statistics table plus the (author, sequence) -> fingerprint table."""

    stats: KeyValueStore[str, AuthorStats]
    entries: KeyValueStore[tuple[str, int], bytes]

    def __init__(self) -> None:
        self.stats = KeyValueStore("author_stats")
        self.entries = KeyValueStore("author_index")

    def get_stats(self, author: str) -> AuthorStats:
        """Return the author's stats; zero count and zero activity if unseen."""
        stats = self.stats.get(author)
        return stats if stats is not None else _ZERO_STATS

    def get_entry_at(self, author: str, index: int) -> bytes | None:
        """Return the fingerprint at ``index`` for ``author``.

        Paging past the end is a normal outcome, so this returns None rather
        than raising.
        """
        if index < 0 or index >= self.get_stats(author).content_count:
            return None
        return self.entries.get((author, index))

    def get_page(
        self, author: str, start: int = 0, limit: int = DEFAULT_PAGE_SIZE
    ) -> list[bytes]:
        """Return up to ``limit`` fingerprints starting at sequence ``start``."""
        if start < 0 or limit <= 0:
            return []
        end = min(start + limit, self.get_stats(author).content_count)
        page: list[bytes] = []
        for seq in range(start, end):
            fingerprint = self.entries.get((author, seq))
            if fingerprint is not None:
                page.append(fingerprint)
        return page

    def stage_append(
        self, uow: UnitOfWork, author: str, fingerprint: bytes, now: int
    ) -> int:
        """Stage the next index entry and the stats bump for ``author``.

        Returns:
            The sequence number the fingerprint will occupy once committed.
        """
        current = self.get_stats(author)
        sequence = current.content_count
        uow.insert(self.entries, (author, sequence), fingerprint)
        uow.upsert(
            self.stats,
            author,
            AuthorStats(content_count=sequence + 1, last_activity=now),
        )
        return sequence

    def authors(self) -> list[str]:
        """All authors with at least one registration."""
        return list(self.stats)
