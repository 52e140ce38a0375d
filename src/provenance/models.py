"""Registry entities and their JSON-safe dictionary forms.

Bytes values (fingerprints, signatures) are rendered as lowercase hex in
dictionaries so records can be written to JSON checkpoints and printed by
the CLI without loss.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict

from .constants import RECORD_VERSION


class ContentRecordDict(TypedDict):
    """Dictionary representation of a ContentRecord."""

    fingerprint: str
    author: str
    timestamp: int
    content_type: str
    signature: str
    title: str
    is_active: bool
    storage_url: str | None
    version: int


class AuthorStatsDict(TypedDict):
    """Dictionary representation of AuthorStats."""

    content_count: int
    last_activity: int


class VerifierEntryDict(TypedDict):
    """Dictionary representation of a VerifierEntry."""

    active: bool


@dataclass(frozen=True)
class ContentRecord:
    """A provenance claim over one fingerprint.

    ``is_active`` and ``version`` are written once at registration and never
    change: there is no retract or re-version operation.
    """

    fingerprint: bytes
    author: str
    timestamp: int
    content_type: str
    signature: bytes
    title: str
    storage_url: str | None = None
    is_active: bool = True
    version: int = RECORD_VERSION

    def to_dict(self) -> ContentRecordDict:
        """Convert to a JSON-safe dictionary."""
        return {
            "fingerprint": self.fingerprint.hex(),
            "author": self.author,
            "timestamp": self.timestamp,
            "content_type": self.content_type,
            "signature": self.signature.hex(),
            "title": self.title,
            "is_active": self.is_active,
            "storage_url": self.storage_url,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: ContentRecordDict) -> ContentRecord:
        """Rebuild a record from its dictionary form."""
        return cls(
            fingerprint=bytes.fromhex(data["fingerprint"]),
            author=data["author"],
            timestamp=int(data["timestamp"]),
            content_type=data["content_type"],
            signature=bytes.fromhex(data["signature"]),
            title=data["title"],
            storage_url=data.get("storage_url"),
            is_active=bool(data.get("is_active", True)),
            version=int(data.get("version", RECORD_VERSION)),
        )


@dataclass(frozen=True)
class AuthorStats:
    """Per-author registration counter and last activity time."""

    content_count: int = 0
    last_activity: int = 0

    def to_dict(self) -> AuthorStatsDict:
        return {
            "content_count": self.content_count,
            "last_activity": self.last_activity,
        }

    @classmethod
    def from_dict(cls, data: AuthorStatsDict) -> AuthorStats:
        return cls(
            content_count=int(data["content_count"]),
            last_activity=int(data["last_activity"]),
        )


@dataclass(frozen=True)
class VerifierEntry:
    """Trusted-verifier flag. Stored, never enforced."""

    active: bool = False

    def to_dict(self) -> VerifierEntryDict:
        return {"active": self.active}
