"""Unit tests for the registry error taxonomy and response conventions."""

import pytest

from src.provenance.errors import (
    AlreadyRegistered,
    ContentLimitReached,
    ErrorCategory,
    ErrorCode,
    ErrorResponse,
    InvalidParams,
    InvalidSignature,
    NotFound,
    RegistryError,
    Unauthorized,
    permission_error,
    resource_error,
    validation_error,
)

FP = bytes(range(32))


class TestErrorEnums:
    """Tests for ErrorCategory and ErrorCode enums."""

    def test_error_category_values(self) -> None:
        assert ErrorCategory.VALIDATION.value == "validation"
        assert ErrorCategory.PERMISSION.value == "permission"
        assert ErrorCategory.RESOURCE.value == "resource"

    def test_error_code_values(self) -> None:
        assert ErrorCode.INVALID_ARGUMENT.value == "invalid_argument"
        assert ErrorCode.NOT_AUTHORIZED.value == "not_authorized"
        assert ErrorCode.INVALID_SIGNATURE.value == "invalid_signature"
        assert ErrorCode.NOT_FOUND.value == "not_found"
        assert ErrorCode.ALREADY_EXISTS.value == "already_exists"
        assert ErrorCode.QUOTA_EXCEEDED.value == "quota_exceeded"


class TestErrorResponse:
    """Tests for ErrorResponse dataclass and factories."""

    def test_error_to_dict(self) -> None:
        resp = ErrorResponse(error="Test error", code="c", category="k")
        result = resp.to_dict()

        assert result["success"] is False
        assert result["error"] == "Test error"
        assert result["retriable"] is False
        assert "details" not in result

    def test_factories_set_category(self) -> None:
        assert validation_error("bad")["category"] == "validation"
        assert permission_error("no")["category"] == "permission"
        assert resource_error("gone")["category"] == "resource"

    def test_factory_details(self) -> None:
        result = resource_error("taken", ErrorCode.ALREADY_EXISTS, fingerprint="ab")
        assert result["code"] == "already_exists"
        assert result["details"] == {"fingerprint": "ab"}


class TestRegistryExceptions:
    """Each exception maps to its documented code and category."""

    @pytest.mark.parametrize(
        "error, code, category",
        [
            (Unauthorized("nope"), "not_authorized", "permission"),
            (AlreadyRegistered(FP, "alice"), "already_exists", "resource"),
            (NotFound(FP), "not_found", "resource"),
            (InvalidSignature(FP, "alice"), "invalid_signature", "permission"),
            (ContentLimitReached("alice", 100), "quota_exceeded", "resource"),
            (InvalidParams("bad title", "title"), "invalid_argument", "validation"),
        ],
    )
    def test_to_dict(self, error: RegistryError, code: str, category: str) -> None:
        result = error.to_dict()

        assert isinstance(error, RegistryError)
        assert result["success"] is False
        assert result["code"] == code
        assert result["category"] == category
        assert result["retriable"] is False
        assert result["error"] == str(error)

    def test_details_carry_hex_fingerprint(self) -> None:
        result = AlreadyRegistered(FP, "alice").to_dict()
        assert result["details"] == {"fingerprint": FP.hex(), "author": "alice"}

    def test_quota_details(self) -> None:
        error = ContentLimitReached("alice", 100)
        assert "100" in str(error)
        assert error.to_dict()["details"] == {"author": "alice", "limit": 100}

    def test_invalid_params_field(self) -> None:
        error = InvalidParams("title too long", "title")
        assert error.field == "title"
        assert error.to_dict()["details"] == {"field": "title"}
