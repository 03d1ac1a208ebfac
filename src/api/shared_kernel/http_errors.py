"""Translation of domain errors into HTTP responses.

Routes catch ``DomainError`` and re-raise the exception built here, so every
context reports failures with the same ``{"kind", "message"}`` body.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import HTTPException, status

from shared_kernel.errors import DomainError, ErrorKind, ValidationFailedError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.SECOND_FACTOR_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.SECOND_FACTOR_INVALID: status.HTTP_401_UNAUTHORIZED,
}

WWW_AUTHENTICATE = "Session, API-Key"

logger = structlog.get_logger(__name__)


def http_exception_for(error: DomainError) -> HTTPException:
    """Build the HTTPException for a caller-facing domain error.

    Args:
        error: The domain error raised by a service

    Returns:
        HTTPException with a stable kind and the error's message
    """
    detail: dict[str, Any] = {"kind": error.kind.value, "message": error.message}
    if isinstance(error, ValidationFailedError):
        detail["violations"] = [
            {"field": field, "problem": problem}
            for field, problem in error.violations
        ]

    status_code = STATUS_BY_KIND[error.kind]
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": WWW_AUTHENTICATE}

    return HTTPException(status_code=status_code, detail=detail, headers=headers)


def internal_error(operation: str) -> HTTPException:
    """Opaque 500 for unexpected failures; details stay in the server log.

    Must be called from inside the ``except`` block so the traceback is
    attached to the log entry.
    """
    logger.exception("unexpected_error", operation=operation)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"kind": "internal", "message": f"Failed to {operation}"},
    )
