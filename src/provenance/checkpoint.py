"""Checkpoint save/load for registry state.

The whole registry (records, author stats, author index, verifier table,
global counter) plus the host's logical height is written as one JSON
document. Writes are atomic: temp file, then os.replace.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypedDict

from .registry import ContentRegistry, RegistryState

logger = logging.getLogger(__name__)

# Current checkpoint format version
CHECKPOINT_VERSION = 1


class CheckpointData(TypedDict):
    """Structure of the checkpoint file."""

    version: int
    height: int
    state: RegistryState
    timestamp: str


def save_checkpoint(registry: ContentRegistry, path: str | Path, height: int) -> Path:
    """Write registry state and logical height to ``path``.

    Args:
        registry: The registry to snapshot
        path: Checkpoint file location
        height: Host logical time to resume from

    Returns:
        Path of the written checkpoint
    """
    checkpoint_path = Path(path)
    checkpoint_path.parent.mkdir(parents=True, exist_ok=True)

    checkpoint: CheckpointData = {
        "version": CHECKPOINT_VERSION,
        "height": height,
        "state": registry.export_state(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    # Atomic write: if interrupted, the previous checkpoint stays valid
    temp_file = checkpoint_path.with_name(checkpoint_path.name + ".tmp")
    try:
        with open(temp_file, "w") as f:
            json.dump(checkpoint, f, indent=2)
        os.replace(temp_file, checkpoint_path)
    except Exception:
        temp_file.unlink(missing_ok=True)
        raise

    logger.debug(
        "Saved checkpoint with %d record(s) at height %d to %s",
        len(checkpoint["state"]["records"]), height, checkpoint_path,
    )
    return checkpoint_path


def load_checkpoint(
    path: str | Path, **registry_kwargs: Any
) -> tuple[ContentRegistry, int] | None:
    """Load a checkpoint written by save_checkpoint.

    Args:
        path: Checkpoint file location
        **registry_kwargs: Constructor arguments for the rebuilt registry
            (quota, signature verifier, event logger, ...)

    Returns:
        (registry, height) if the file exists, None otherwise.

    Raises:
        ValueError: Unsupported version, or state that breaks an invariant
    """
    checkpoint_path = Path(path)
    if not checkpoint_path.exists():
        return None

    with open(checkpoint_path) as f:
        data: dict[str, Any] = json.load(f)

    version = data.get("version")
    if version != CHECKPOINT_VERSION:
        raise ValueError(f"Unsupported checkpoint version: {version!r}")

    registry = ContentRegistry.from_state(data["state"], **registry_kwargs)
    return registry, int(data.get("height", 0))
