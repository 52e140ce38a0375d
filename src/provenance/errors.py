"""Error taxonomy and standardized error responses for the registry.

Every registry failure is raised as a subclass of RegistryError before any
state is touched. Callers that need a serializable result (the CLI, a host
RPC layer) convert the exception with ``to_dict()``, which produces the same
response shape as the factory functions below.

Usage:
    from src.provenance.errors import AlreadyRegistered, resource_error

    try:
        registry.register(...)
    except RegistryError as e:
        return e.to_dict()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided malformed arguments
    - PERMISSION: Caller not allowed, or claim not provably theirs
    - RESOURCE: Fingerprint missing, already taken, or quota spent
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    INVALID_ARGUMENT = "invalid_argument"

    # Permission errors
    NOT_AUTHORIZED = "not_authorized"
    INVALID_SIGNATURE = "invalid_signature"

    # Resource errors
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    QUOTA_EXCEEDED = "quota_exceeded"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, resource)
    - retriable: Whether resubmitting the same call could succeed
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
    **details: object,
) -> dict[str, object]:
    """Create a validation error response.

    Args:
        message: Human-readable error message
        code: Specific error code (default: INVALID_ARGUMENT)
        **details: Additional context (e.g., field="title")

    Returns:
        Error response dict with success=False
    """
    return ErrorResponse(
        error=message,
        code=code.value,
        category=ErrorCategory.VALIDATION.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()


def permission_error(
    message: str,
    code: ErrorCode = ErrorCode.NOT_AUTHORIZED,
    **details: object,
) -> dict[str, object]:
    """Create a permission error response."""
    return ErrorResponse(
        error=message,
        code=code.value,
        category=ErrorCategory.PERMISSION.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()


def resource_error(
    message: str,
    code: ErrorCode = ErrorCode.NOT_FOUND,
    **details: object,
) -> dict[str, object]:
    """Create a resource error response.

    Use for fingerprint not found, already registered, or quota reached.
    """
    return ErrorResponse(
        error=message,
        code=code.value,
        category=ErrorCategory.RESOURCE.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()


_FACTORIES = {
    ErrorCategory.VALIDATION: validation_error,
    ErrorCategory.PERMISSION: permission_error,
    ErrorCategory.RESOURCE: resource_error,
}


class RegistryError(Exception):
    """Base class for all registry failures.

    Subclasses pin ``code`` and ``category``; ``details`` carries the
    offending values so callers can react without parsing the message.
    """

    code: ErrorCode = ErrorCode.INVALID_ARGUMENT
    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Render as a standardized error response dict."""
        factory = _FACTORIES[self.category]
        return factory(self.message, self.code, **self.details)


class Unauthorized(RegistryError):
    """Reserved for caller-restricted operations. Nothing raises it yet."""

    code = ErrorCode.NOT_AUTHORIZED
    category = ErrorCategory.PERMISSION


class AlreadyRegistered(RegistryError):
    """Raised when the fingerprint is already claimed."""

    code = ErrorCode.ALREADY_EXISTS
    category = ErrorCategory.RESOURCE

    def __init__(self, fingerprint: bytes, author: str) -> None:
        self.fingerprint = fingerprint
        self.author = author
        super().__init__(
            f"Fingerprint {fingerprint.hex()} is already registered",
            fingerprint=fingerprint.hex(),
            author=author,
        )


class NotFound(RegistryError):
    """Raised when verifying a fingerprint nobody has registered."""

    code = ErrorCode.NOT_FOUND
    category = ErrorCategory.RESOURCE

    def __init__(self, fingerprint: bytes) -> None:
        self.fingerprint = fingerprint
        super().__init__(
            f"Fingerprint {fingerprint.hex()} is not registered",
            fingerprint=fingerprint.hex(),
        )


class InvalidSignature(RegistryError):
    """Raised when the configured verifier rejects the claim's signature."""

    code = ErrorCode.INVALID_SIGNATURE
    category = ErrorCategory.PERMISSION

    def __init__(self, fingerprint: bytes, signer: str) -> None:
        self.fingerprint = fingerprint
        self.signer = signer
        super().__init__(
            f"Signature over {fingerprint.hex()} does not verify for '{signer}'",
            fingerprint=fingerprint.hex(),
            signer=signer,
        )


class ContentLimitReached(RegistryError):
    """Raised when an author has used up their registration quota."""

    code = ErrorCode.QUOTA_EXCEEDED
    category = ErrorCategory.RESOURCE

    def __init__(self, author: str, limit: int) -> None:
        self.author = author
        self.limit = limit
        super().__init__(
            f"Author '{author}' has reached the limit of {limit} registrations",
            author=author,
            limit=limit,
        )


class InvalidParams(RegistryError):
    """Raised for malformed or out-of-range arguments."""

    code = ErrorCode.INVALID_ARGUMENT
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, field: str) -> None:
        self.field = field
        super().__init__(message, field=field)
