"""Pytest fixtures for provenance registry tests.

Common fixtures for building registries, fingerprints and signatures.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

import hashlib
from collections.abc import Callable
from pathlib import Path

import pytest

from src.provenance.constants import SIGNATURE_SIZE
from src.provenance.logger import EventLogger
from src.provenance.registry import ContentRegistry


def make_fingerprint(label: str | int) -> bytes:
    """Deterministic 32-byte fingerprint for a label."""
    return hashlib.sha256(str(label).encode()).digest()


@pytest.fixture
def registry() -> ContentRegistry:
    """Create a fresh registry with the default quota and no-op verifier."""
    return ContentRegistry()


@pytest.fixture
def signature() -> bytes:
    """A well-formed (never verified) 65-byte signature."""
    return bytes(range(SIGNATURE_SIZE))


@pytest.fixture
def fingerprint_factory() -> Callable[[str | int], bytes]:
    return make_fingerprint


@pytest.fixture
def event_logger(tmp_path: Path) -> EventLogger:
    """EventLogger writing into the test's temp directory."""
    return EventLogger(str(tmp_path / "events.jsonl"))


@pytest.fixture
def register(
    registry: ContentRegistry, signature: bytes
) -> Callable[..., bytes]:
    """Shorthand for registering with sensible defaults.

    Usage: register(fingerprint, caller="alice", now=5, title="x")
    """

    def _register(
        fingerprint: bytes,
        caller: str = "alice",
        now: int = 1,
        content_type: str = "article",
        title: str = "Untitled",
        storage_url: str | None = None,
    ) -> bytes:
        return registry.register(
            fingerprint, content_type, signature, title, storage_url, caller, now
        )

    return _register
