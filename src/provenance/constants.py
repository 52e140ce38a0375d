"""Centralized constants for the provenance registry.

Size limits and quotas live here to avoid magic numbers scattered across
modules. Values that operators may tune are also exposed through
config/config.yaml (see config_schema.RegistryConfig); these are the defaults.
"""

FINGERPRINT_SIZE = 32
"""Fingerprints are 32-byte hashes (e.g. SHA-256 digests)."""

SIGNATURE_SIZE = 65
"""Signatures are stored verbatim as r || s || v (32 + 32 + 1 bytes)."""

MAX_CONTENT_TYPE_LENGTH = 20
MAX_TITLE_LENGTH = 100
MAX_STORAGE_URL_LENGTH = 256

MAX_CONTENT_PER_AUTHOR = 100
"""Quota: the most fingerprints one author may ever register."""

RECORD_VERSION = 1
"""Every record is written at version 1; no update path exists."""

DEFAULT_PAGE_SIZE = 20
