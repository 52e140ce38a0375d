"""Content provenance registry source package.

This package contains:
- config: Configuration loading and management
- provenance: Registry state machine, author index, signatures, checkpoints
"""

from __future__ import annotations

__all__: list[str] = []
