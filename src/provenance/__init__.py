# Provenance registry package
from .registry import ContentRegistry, RegistryState
from .author_index import AuthorIndex
from .verifier_registry import VerifierRegistry
from .store import KeyValueStore, UnitOfWork, KeyExistsError
from .models import ContentRecord, AuthorStats, VerifierEntry
from .errors import (
    RegistryError, Unauthorized, AlreadyRegistered, NotFound,
    InvalidSignature, ContentLimitReached, InvalidParams,
    ErrorCode, ErrorCategory,
)
from .signatures import SignatureVerifier, EcdsaSignatureVerifier, accept_all, build_verifier
from .logger import EventLogger
from .host import BlockClock, RegistryHost
from .checkpoint import save_checkpoint, load_checkpoint
from .constants import MAX_CONTENT_PER_AUTHOR, FINGERPRINT_SIZE, SIGNATURE_SIZE

__all__ = [
    "ContentRegistry", "RegistryState",
    "AuthorIndex",
    "VerifierRegistry",
    "KeyValueStore", "UnitOfWork", "KeyExistsError",
    "ContentRecord", "AuthorStats", "VerifierEntry",
    "RegistryError", "Unauthorized", "AlreadyRegistered", "NotFound",
    "InvalidSignature", "ContentLimitReached", "InvalidParams",
    "ErrorCode", "ErrorCategory",
    "SignatureVerifier", "EcdsaSignatureVerifier", "accept_all", "build_verifier",
    "EventLogger",
    "BlockClock", "RegistryHost",
    "save_checkpoint", "load_checkpoint",
    "MAX_CONTENT_PER_AUTHOR", "FINGERPRINT_SIZE", "SIGNATURE_SIZE",
]
