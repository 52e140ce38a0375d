"""Trusted-verifier table

Maps verifier identities to an active flag. The table is part of the
persisted state layout but no operation writes it and no enforcement reads
it yet; it exists so a future "only trusted verifiers may attest" policy can
be added without changing the state format.
"""

from __future__ import annotations

from .models import VerifierEntry, VerifierEntryDict
from .store import KeyValueStore


class VerifierRegistry:
    """Read-only view over the verifier table."""

    entries: KeyValueStore[str, VerifierEntry]

    def __init__(self) -> None:
        self.entries = KeyValueStore("verifiers")

    def get(self, verifier: str) -> VerifierEntry | None:
        return self.entries.get(verifier)

    def is_active(self, verifier: str) -> bool:
        """True only for a known verifier whose flag is set."""
        entry = self.entries.get(verifier)
        return entry is not None and entry.active

    def count(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, VerifierEntryDict]:
        return {verifier: entry.to_dict() for verifier, entry in self.entries.items()}
