"""Unit tests for the domain error to HTTP mapping."""

import pytest
from fastapi import status

from shared_kernel.errors import (
    ConflictError,
    NotFoundError,
    SecondFactorInvalidError,
    SecondFactorRequiredError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationFailedError,
    Violations,
)
from shared_kernel.http_errors import http_exception_for, internal_error


class TestHttpExceptionFor:
    @pytest.mark.parametrize(
        "error,expected_status",
        [
            (UnauthenticatedError("no"), status.HTTP_401_UNAUTHORIZED),
            (UnauthorizedError("no"), status.HTTP_403_FORBIDDEN),
            (NotFoundError("gone"), status.HTTP_404_NOT_FOUND),
            (ConflictError("taken"), status.HTTP_409_CONFLICT),
            (SecondFactorInvalidError("bad"), status.HTTP_401_UNAUTHORIZED),
            (SecondFactorRequiredError("code"), status.HTTP_401_UNAUTHORIZED),
        ],
    )
    def test_status_follows_kind(self, error, expected_status):
        exc = http_exception_for(error)

        assert exc.status_code == expected_status
        assert exc.detail["kind"] == error.kind.value
        assert exc.detail["message"] == error.message

    def test_unauthenticated_sets_www_authenticate(self):
        exc = http_exception_for(UnauthenticatedError("no"))
        assert "WWW-Authenticate" in exc.headers

    def test_forbidden_has_no_challenge(self):
        assert http_exception_for(UnauthorizedError("no")).headers is None

    def test_validation_lists_every_violation(self):
        exc = http_exception_for(
            ValidationFailedError([("name", "too long"), ("image", "blank")])
        )

        assert exc.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert exc.detail["violations"] == [
            {"field": "name", "problem": "too long"},
            {"field": "image", "problem": "blank"},
        ]


class TestInternalError:
    def test_hides_details(self):
        try:
            raise RuntimeError("connection string with password")
        except RuntimeError:
            exc = internal_error("create application")

        assert exc.status_code == 500
        assert "password" not in exc.detail["message"]
        assert exc.detail == {
            "kind": "internal",
            "message": "Failed to create application",
        }


class TestViolations:
    def test_empty_does_not_raise(self):
        Violations().raise_if_any()

    def test_raises_all_collected(self):
        violations = Violations()
        violations.add("a", "bad")
        violations.add("b", "worse")

        with pytest.raises(ValidationFailedError) as exc_info:
            violations.raise_if_any()

        assert exc_info.value.violations == [("a", "bad"), ("b", "worse")]
