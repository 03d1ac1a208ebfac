"""Caller-facing error taxonomy shared by every bounded context.

Each error carries a stable ``kind`` that the presentation layer maps to a
response status. Bounded contexts subclass these in their own
``ports/exceptions.py`` so the kind survives while the name stays specific.
Anything that is not a ``DomainError`` is an internal failure and must never
be shown to the caller verbatim.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable identifiers for caller-facing failures."""

    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    CONFLICT = "conflict"
    SECOND_FACTOR_REQUIRED = "second_factor_required"
    SECOND_FACTOR_INVALID = "second_factor_invalid"


class DomainError(Exception):
    """Base class for recoverable errors surfaced to the caller."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(DomainError):
    """No grant, an invalid grant, or a grant in the wrong phase."""

    kind = ErrorKind.UNAUTHENTICATED


class UnauthorizedError(DomainError):
    """Valid grant, but the permission level is too low."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(DomainError):
    """Target does not resolve inside the caller's visible scope."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """A uniqueness rule would be violated."""

    kind = ErrorKind.CONFLICT


class SecondFactorRequiredError(UnauthenticatedError):
    """The password was accepted but a one-time code is still needed.

    Raised when a ``totp_pending`` session is presented where a full sign-in
    is required. It is still an authentication failure, only with a kind
    that tells the client to complete the second factor.
    """

    kind = ErrorKind.SECOND_FACTOR_REQUIRED


class SecondFactorInvalidError(DomainError):
    """The one-time code, or the pending session, was not acceptable."""

    kind = ErrorKind.SECOND_FACTOR_INVALID


class ValidationFailedError(DomainError):
    """Malformed or out-of-range input.

    Collects every violation found so a caller can fix them in one pass.

    Attributes:
        violations: ``(field, problem)`` pairs in the order they were found
    """

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, violations: list[tuple[str, str]]):
        self.violations = list(violations)
        message = "; ".join(f"{field}: {problem}" for field, problem in violations)
        super().__init__(message or "invalid input")


class Violations:
    """Accumulates field problems and raises them together.

    Example:
        violations = Violations()
        if not name:
            violations.add("name", "must not be empty")
        violations.raise_if_any()
    """

    def __init__(self) -> None:
        self._items: list[tuple[str, str]] = []

    def add(self, field: str, problem: str) -> None:
        self._items.append((field, problem))

    def __bool__(self) -> bool:
        return bool(self._items)

    def raise_if_any(self) -> None:
        if self._items:
            raise ValidationFailedError(self._items)
