"""Content registry - the provenance state machine

Binds a 32-byte fingerprint to the caller who first claimed it, together
with a logical timestamp and descriptive metadata.

Invariants:
- A fingerprint key, once written, is never overwritten or deleted.
- An author never holds more than ``max_content_per_author`` records.
- Each author's index is the gap-free range [0, content_count).
- register() writes the record, the index entry and the author stats as
  one unit of work: all three, or none.

Caller identity and logical time are explicit arguments. The host
environment authenticates the caller, supplies a non-decreasing height and
serializes calls; see host.RegistryHost for an in-process host.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypedDict

from .author_index import AuthorIndex
from .constants import (
    DEFAULT_PAGE_SIZE,
    FINGERPRINT_SIZE,
    MAX_CONTENT_PER_AUTHOR,
    MAX_CONTENT_TYPE_LENGTH,
    MAX_STORAGE_URL_LENGTH,
    MAX_TITLE_LENGTH,
    RECORD_VERSION,
    SIGNATURE_SIZE,
)
from .errors import (
    AlreadyRegistered,
    ContentLimitReached,
    InvalidParams,
    InvalidSignature,
    NotFound,
    RegistryError,
)
from .models import (
    AuthorStats,
    AuthorStatsDict,
    ContentRecord,
    ContentRecordDict,
    VerifierEntry,
    VerifierEntryDict,
)
from .signatures import SignatureVerifier, accept_all, build_verifier
from .store import KeyValueStore, UnitOfWork
from .verifier_registry import VerifierRegistry

if TYPE_CHECKING:
    from ..config_schema import AppConfig
    from .logger import EventLogger

logger = logging.getLogger(__name__)

_TOTAL_REGISTRATIONS = "total_registrations"

FINGERPRINT_MESSAGE = f"fingerprint must be {FINGERPRINT_SIZE} bytes"


def _is_fingerprint(value: object) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == FINGERPRINT_SIZE


def _lookup_key(fingerprint: object) -> bytes:
    """Normalize a fingerprint argument for a read, or raise InvalidParams."""
    if not _is_fingerprint(fingerprint):
        raise InvalidParams(FINGERPRINT_MESSAGE, "fingerprint")
    return bytes(fingerprint)  # type: ignore[arg-type]


class RegistryState(TypedDict):
    """Snapshot of every registry table, JSON-safe."""

    records: list[ContentRecordDict]
    author_stats: dict[str, AuthorStatsDict]
    author_index: dict[str, list[str]]
    verifiers: dict[str, VerifierEntryDict]
    total_registrations: int


class ContentRegistry:
    """Fingerprint -> ContentRecord map with uniqueness and quota enforcement.

    Owns the record table, the AuthorIndex tables, the inert verifier table
    and a global counter table.
    """

    records: KeyValueStore[bytes, ContentRecord]
    counters: KeyValueStore[str, int]
    index: AuthorIndex
    verifiers: VerifierRegistry
    signature_verifier: SignatureVerifier
    event_logger: "EventLogger | None"

    def __init__(
        self,
        max_content_per_author: int = MAX_CONTENT_PER_AUTHOR,
        signature_verifier: SignatureVerifier | None = None,
        event_logger: "EventLogger | None" = None,
        max_content_type_length: int = MAX_CONTENT_TYPE_LENGTH,
        max_title_length: int = MAX_TITLE_LENGTH,
        max_storage_url_length: int = MAX_STORAGE_URL_LENGTH,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.records = KeyValueStore("records")
        self.counters = KeyValueStore("counters")
        self.index = AuthorIndex()
        self.verifiers = VerifierRegistry()
        self.max_content_per_author = max_content_per_author
        self.signature_verifier = signature_verifier or accept_all
        self.event_logger = event_logger
        self.max_content_type_length = max_content_type_length
        self.max_title_length = max_title_length
        self.max_storage_url_length = max_storage_url_length
        self.page_size = page_size

    @staticmethod
    def config_kwargs(
        config: "AppConfig",
        event_logger: "EventLogger | None" = None,
    ) -> dict[str, Any]:
        """Constructor arguments taken from validated configuration.

        Shared by from_config() and checkpoint restore so both build the
        registry the same way.
        """
        return {
            "max_content_per_author": config.registry.max_content_per_author,
            "signature_verifier": build_verifier(
                config.signatures.mode, config.signatures.public_keys
            ),
            "event_logger": event_logger,
            "max_content_type_length": config.registry.max_content_type_length,
            "max_title_length": config.registry.max_title_length,
            "max_storage_url_length": config.registry.max_storage_url_length,
            "page_size": config.registry.page_size,
        }

    @classmethod
    def from_config(
        cls,
        config: "AppConfig",
        event_logger: "EventLogger | None" = None,
    ) -> "ContentRegistry":
        """Create a registry from validated configuration."""
        return cls(**cls.config_kwargs(config, event_logger))

    # ========== Writes ==========

    def register(
        self,
        fingerprint: bytes,
        content_type: str,
        signature: bytes,
        title: str,
        storage_url: str | None,
        caller: str,
        now: int,
    ) -> bytes:
        """Claim ``fingerprint`` for ``caller`` at logical time ``now``.

        Args:
            fingerprint: 32-byte content hash
            content_type: Short type tag (e.g. "article")
            signature: 65-byte signature, stored verbatim
            title: Human-readable title
            storage_url: Optional pointer to off-registry storage
            caller: Authenticated caller identity (becomes the author)
            now: Current logical time (block height)

        Returns:
            The registered fingerprint, echoed back as confirmation.

        Raises:
            InvalidParams: Malformed argument; nothing written
            AlreadyRegistered: Fingerprint already claimed; nothing written
            ContentLimitReached: Caller is at quota; nothing written
            InvalidSignature: Configured verifier rejected the signature
        """
        self._validate(fingerprint, content_type, signature, title, storage_url, caller, now)
        fingerprint = bytes(fingerprint)
        signature = bytes(signature)

        try:
            existing = self.records.get(fingerprint)
            if existing is not None:
                raise AlreadyRegistered(fingerprint, existing.author)

            stats = self.index.get_stats(caller)
            if stats.content_count >= self.max_content_per_author:
                raise ContentLimitReached(caller, self.max_content_per_author)

            if not self.signature_verifier(fingerprint, signature, caller):
                raise InvalidSignature(fingerprint, caller)
        except RegistryError as e:
            logger.warning("Rejected registration by '%s': %s", caller, e.message)
            self._log_event("log_rejected", fingerprint, caller, now, e.code.value, e.message)
            raise

        record = ContentRecord(
            fingerprint=fingerprint,
            author=caller,
            timestamp=now,
            content_type=content_type,
            signature=signature,
            title=title,
            storage_url=storage_url,
            is_active=True,
            version=RECORD_VERSION,
        )

        uow = UnitOfWork()
        uow.insert(self.records, fingerprint, record)
        sequence = self.index.stage_append(uow, caller, fingerprint, now)
        uow.upsert(self.counters, _TOTAL_REGISTRATIONS, self.total_registrations + 1)
        uow.commit()

        logger.info(
            "Registered %s for '%s' at height %d (seq %d)",
            fingerprint.hex(), caller, now, sequence,
        )
        self._log_event("log_registered", fingerprint, caller, now, sequence, content_type)
        return fingerprint

    def _log_event(self, method: str, *args: Any) -> None:
        """Write to the event log, if any.

        The audit trail never changes an operation's outcome: a write that
        fails here is reported through logging and otherwise ignored.
        """
        if self.event_logger is None:
            return
        try:
            getattr(self.event_logger, method)(*args)
        except OSError:
            logger.exception("Event log write failed (%s)", method)

    def _validate(
        self,
        fingerprint: bytes,
        content_type: str,
        signature: bytes,
        title: str,
        storage_url: str | None,
        caller: str,
        now: int,
    ) -> None:
        """Boundary checks. Raises InvalidParams on the first bad argument."""
        problem: tuple[str, str] | None = None
        if not _is_fingerprint(fingerprint):
            problem = ("fingerprint", FINGERPRINT_MESSAGE)
        elif not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_SIZE:
            problem = ("signature", f"signature must be {SIGNATURE_SIZE} bytes")
        elif not isinstance(content_type, str) or len(content_type) > self.max_content_type_length:
            problem = (
                "content_type",
                f"content_type must be at most {self.max_content_type_length} characters",
            )
        elif not isinstance(title, str) or len(title) > self.max_title_length:
            problem = ("title", f"title must be at most {self.max_title_length} characters")
        elif storage_url is not None and (
            not isinstance(storage_url, str) or len(storage_url) > self.max_storage_url_length
        ):
            problem = (
                "storage_url",
                f"storage_url must be at most {self.max_storage_url_length} characters",
            )
        elif not isinstance(caller, str) or not caller:
            problem = ("caller", "caller identity is required")
        elif isinstance(now, bool) or not isinstance(now, int) or now < 0:
            problem = ("now", "logical time must be a non-negative integer")

        if problem is not None:
            field, message = problem
            logger.warning("Rejected registration: %s", message)
            raise InvalidParams(message, field)

    # ========== Reads ==========

    def verify(self, fingerprint: bytes) -> ContentRecord:
        """Return the stored record for ``fingerprint``.

        Raises:
            InvalidParams: If fingerprint is not a 32-byte value
            NotFound: If the fingerprint was never registered
        """
        key = _lookup_key(fingerprint)
        record = self.records.get(key)
        if record is None:
            raise NotFound(key)
        return record

    def is_registered(self, fingerprint: bytes) -> bool:
        return _lookup_key(fingerprint) in self.records

    def get_stats(self, author: str) -> AuthorStats:
        return self.index.get_stats(author)

    def get_entry_at(self, author: str, index: int) -> bytes | None:
        return self.index.get_entry_at(author, index)

    def list_author_content(
        self, author: str, start: int = 0, limit: int | None = None
    ) -> list[bytes]:
        """One page of the author's fingerprints, in registration order."""
        return self.index.get_page(author, start, limit if limit is not None else self.page_size)

    @property
    def total_registrations(self) -> int:
        """Number of successful registrations across all authors."""
        return self.counters.get(_TOTAL_REGISTRATIONS, 0) or 0

    # ========== Snapshots ==========

    def export_state(self) -> RegistryState:
        """Snapshot every table into a JSON-safe dict."""
        author_index: dict[str, list[str]] = {}
        for author in self.index.authors():
            count = self.index.get_stats(author).content_count
            author_index[author] = [
                fp.hex() for fp in self.index.get_page(author, 0, count)
            ]
        return {
            "records": [record.to_dict() for _, record in self.records.items()],
            "author_stats": {
                author: stats.to_dict() for author, stats in self.index.stats.items()
            },
            "author_index": author_index,
            "verifiers": self.verifiers.to_dict(),
            "total_registrations": self.total_registrations,
        }

    @classmethod
    def from_state(cls, state: RegistryState, **kwargs: object) -> "ContentRegistry":
        """Rebuild a registry from ``export_state()`` output.

        Extra keyword arguments are passed to the constructor.

        Raises:
            ValueError: If the snapshot breaks a registry invariant
        """
        registry = cls(**kwargs)  # type: ignore[arg-type]
        try:
            registry._restore(state)
        except (KeyError, TypeError, AttributeError) as e:
            # KeyExistsError lands here too: a duplicated fingerprint or index slot
            raise ValueError(f"Malformed registry snapshot: {e}") from e
        return registry

    def _restore(self, state: RegistryState) -> None:
        for raw in state.get("records", []):
            record = ContentRecord.from_dict(raw)
            self.records.put_if_absent(record.fingerprint, record)

        for author, raw_stats in state.get("author_stats", {}).items():
            stats = AuthorStats.from_dict(raw_stats)
            entries = state.get("author_index", {}).get(author, [])
            if len(entries) != stats.content_count:
                raise ValueError(
                    f"Author '{author}' has {stats.content_count} registrations "
                    f"but {len(entries)} index entries"
                )
            for seq, fp_hex in enumerate(entries):
                fingerprint = bytes.fromhex(fp_hex)
                record = self.records.get(fingerprint)
                if record is None or record.author != author:
                    raise ValueError(
                        f"Index entry {seq} of '{author}' points at {fp_hex}, "
                        "which is not a record of that author"
                    )
                self.index.entries.put_if_absent((author, seq), fingerprint)
            self.index.stats.put_if_absent(author, stats)

        if sum(s.content_count for _, s in self.index.stats.items()) != len(self.records):
            raise ValueError("Records and author index disagree on the number of registrations")

        for verifier, raw_entry in state.get("verifiers", {}).items():
            self.verifiers.entries.put_if_absent(
                verifier, VerifierEntry(active=bool(raw_entry.get("active", False)))
            )

        self.counters.upsert(
            _TOTAL_REGISTRATIONS, int(state.get("total_registrations", len(self.records)))
        )
