"""Domain probe for session token operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to issuing and validating session tokens.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SessionTokenProbe(Protocol):
    """Domain probe for session token operations."""

    def token_issued(self, user_id: str, phase: str) -> None:
        """Record that a session token was issued."""
        ...

    def token_validated(self, user_id: str, phase: str) -> None:
        """Record that a session token was successfully validated."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that session token validation failed."""
        ...

    def with_context(self, context: ObservationContext) -> SessionTokenProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSessionTokenProbe:
    """Default implementation of SessionTokenProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSessionTokenProbe:
        """Create a new probe with observation context bound."""
        return DefaultSessionTokenProbe(logger=self._logger, context=context)

    def token_issued(self, user_id: str, phase: str) -> None:
        """Record that a session token was issued."""
        self._logger.info(
            "session_token_issued",
            user_id=user_id,
            phase=phase,
            **self._get_context_kwargs(),
        )

    def token_validated(self, user_id: str, phase: str) -> None:
        """Record that a session token was successfully validated."""
        self._logger.debug(
            "session_token_validated",
            user_id=user_id,
            phase=phase,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        """Record that session token validation failed."""
        self._logger.warning(
            "session_token_validation_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
