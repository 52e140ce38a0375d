"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class RegistryConfig(StrictModel):
    """Quota and field-size limits enforced by the registry."""

    max_content_per_author: int = Field(
        default=100,
        gt=0,
        description="Maximum fingerprints a single author may register"
    )
    max_content_type_length: int = Field(
        default=20,
        gt=0,
        description="Maximum characters in a content type tag"
    )
    max_title_length: int = Field(
        default=100,
        gt=0,
        description="Maximum characters in a title"
    )
    max_storage_url_length: int = Field(
        default=256,
        gt=0,
        description="Maximum characters in a storage URL"
    )
    page_size: int = Field(
        default=20,
        gt=0,
        description="Default page size when listing an author's content"
    )


# =============================================================================
# SIGNATURE MODEL
# =============================================================================

class SignaturesConfig(StrictModel):
    """Signature verification settings.

    mode "none" stores signatures without checking them. mode "ecdsa"
    checks each claim against the author's secp256k1 public key.
    """

    mode: Literal["none", "ecdsa"] = Field(
        default="none",
        description="Signature verification mode"
    )
    public_keys: dict[str, str] = Field(
        default_factory=dict,
        description="Author identity -> hex-encoded SEC1 public key"
    )

    @field_validator("public_keys")
    @classmethod
    def keys_are_hex(cls, v: dict[str, str]) -> dict[str, str]:
        """Public keys must be valid hex strings."""
        for author, key in v.items():
            try:
                bytes.fromhex(key)
            except ValueError as e:
                raise ValueError(f"public key for '{author}' is not valid hex") from e
        return v


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the Python logging module"
    )
    enabled: bool = Field(
        default=True,
        description="Write the JSONL event log"
    )
    output_file: str = Field(
        default="registry_events.jsonl",
        description="JSONL event log path"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of events for read_recent()"
    )


# =============================================================================
# CHECKPOINT MODEL
# =============================================================================

class CheckpointConfig(StrictModel):
    """Where registry state is persisted between runs."""

    file: str = Field(
        default="registry_state.json",
        description="Checkpoint file path"
    )


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    signatures: SignaturesConfig = Field(default_factory=SignaturesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    checkpoint: CheckpointConfig = Field(default_factory=CheckpointConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    "AppConfig",
    "RegistryConfig",
    "SignaturesConfig",
    "LoggingConfig",
    "CheckpointConfig",
    "load_validated_config",
    "validate_config_dict",
]
