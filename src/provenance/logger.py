"""JSONL event logger - append-only audit trail of registry activity"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get


class EventLogger:
    """Append-only JSONL event log.

    Every event carries a monotonic ``sequence`` and a UTC wall-clock
    ``timestamp``. The wall clock is for operators only; the registry's
    own notion of time is the logical height passed into each operation.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | None = None, truncate: bool = False) -> None:
        """Initialize the event logger.

        Args:
            output_file: Path of the JSONL file (default: logging.output_file
                from config, then registry_events.jsonl)
            truncate: Start with an empty file instead of appending
        """
        resolved_file = output_file or get("logging.output_file") or "registry_events.jsonl"
        if not isinstance(resolved_file, str):
            resolved_file = "registry_events.jsonl"
        self.output_path = Path(resolved_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        if truncate or not self.output_path.exists():
            self.output_path.write_text("")
        self._sequence = 0

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def log_registered(
        self,
        fingerprint: bytes,
        author: str,
        height: int,
        sequence_number: int,
        content_type: str,
    ) -> None:
        """Log a successful registration.

        Args:
            fingerprint: The newly claimed fingerprint
            author: The caller credited with the claim
            height: Logical time of the registration
            sequence_number: Position in the author's index
            content_type: Content type tag of the record
        """
        self.log("content_registered", {
            "fingerprint": fingerprint.hex(),
            "author": author,
            "height": height,
            "sequence_number": sequence_number,
            "content_type": content_type,
        })

    def log_rejected(
        self,
        fingerprint: bytes,
        author: str,
        height: int,
        code: str,
        reason: str,
    ) -> None:
        """Log a registration attempt that failed a precondition."""
        self.log("registration_rejected", {
            "fingerprint": fingerprint.hex(),
            "author": author,
            "height": height,
            "code": code,
            "reason": reason,
        })

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            if isinstance(default_recent, int):
                n = default_recent
            else:
                n = 50
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_text().strip().split("\n")
        lines = [line for line in lines if line]
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]
