"""Pluggable signature verification for registration claims.

The registry never does cryptography itself. It calls a SignatureVerifier
with (fingerprint, signature, signer) and rejects the claim when the answer
is False. Two implementations ship:

- accept_all: no-op verifier, the default. Signatures are stored verbatim.
- EcdsaSignatureVerifier: secp256k1 ECDSA check against a directory of
  author public keys, using the ``cryptography`` package.

Signature layout is r || s || v (32 + 32 + 1 bytes). The recovery byte v is
not needed when the public key is known, so it is ignored. The fingerprint
is already a SHA-256 digest and is verified as a prehashed message.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from cryptography.exceptions import InvalidSignature as CryptoInvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, encode_dss_signature

from .constants import FINGERPRINT_SIZE, SIGNATURE_SIZE

logger = logging.getLogger(__name__)

_SCALAR_SIZE = 32


class SignatureVerifier(Protocol):
    """Callable deciding whether ``signer`` really signed ``fingerprint``."""

    def __call__(self, fingerprint: bytes, signature: bytes, signer: str) -> bool: ...


def accept_all(fingerprint: bytes, signature: bytes, signer: str) -> bool:
    """No-op verifier: every signature is accepted."""
    return True


class EcdsaSignatureVerifier:
    """secp256k1 ECDSA verifier backed by an author -> public key directory.

    Args:
        public_keys: Maps author identity to a SEC1-encoded public key
            (compressed or uncompressed point bytes)
    """

    _keys: dict[str, ec.EllipticCurvePublicKey]

    def __init__(self, public_keys: Mapping[str, bytes]) -> None:
        self._keys = {}
        for author, encoded in public_keys.items():
            try:
                self._keys[author] = ec.EllipticCurvePublicKey.from_encoded_point(
                    ec.SECP256K1(), encoded
                )
            except ValueError:
                logger.warning("Ignoring malformed public key for '%s'", author)

    def knows(self, signer: str) -> bool:
        return signer in self._keys

    def __call__(self, fingerprint: bytes, signature: bytes, signer: str) -> bool:
        key = self._keys.get(signer)
        if key is None:
            logger.debug("No public key on file for '%s'", signer)
            return False
        if len(fingerprint) != FINGERPRINT_SIZE or len(signature) != SIGNATURE_SIZE:
            return False

        r = int.from_bytes(signature[:_SCALAR_SIZE], "big")
        s = int.from_bytes(signature[_SCALAR_SIZE : 2 * _SCALAR_SIZE], "big")
        try:
            key.verify(
                encode_dss_signature(r, s),
                fingerprint,
                ec.ECDSA(Prehashed(hashes.SHA256())),
            )
        except (CryptoInvalidSignature, ValueError):
            return False
        return True


def build_verifier(mode: str, public_keys: Mapping[str, str] | None = None) -> SignatureVerifier:
    """Create the verifier selected by configuration.

    Args:
        mode: "none" for accept_all, "ecdsa" for EcdsaSignatureVerifier
        public_keys: Author -> hex-encoded SEC1 public key (ecdsa mode)

    Raises:
        ValueError: On an unknown mode or non-hex key material
    """
    if mode == "none":
        return accept_all
    if mode == "ecdsa":
        decoded = {author: bytes.fromhex(key) for author, key in (public_keys or {}).items()}
        return EcdsaSignatureVerifier(decoded)
    raise ValueError(f"Unknown signature verification mode: {mode!r}")
