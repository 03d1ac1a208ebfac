"""Protocol for user application service observability.

Covers signup, password sign-in, lockout and second-factor enrollment.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_signed_up(self, user_id: int, username: str, organization_id: int) -> None:
        """Record that a user and their personal organization were created."""
        ...

    def signup_failed(self, username: str, error: str) -> None:
        ...

    def user_signed_in(self, user_id: int, second_factor_required: bool) -> None:
        ...

    def sign_in_failed(self, identifier: str, reason: str) -> None:
        """Record a rejected sign-in without revealing which credential failed."""
        ...

    def account_locked(self, user_id: int, locked_until: datetime) -> None:
        ...

    def second_factor_enabled(self, user_id: int) -> None:
        ...

    def second_factor_disabled(self, user_id: int) -> None:
        ...

    def second_factor_change_failed(self, user_id: int, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_signed_up(self, user_id: int, username: str, organization_id: int) -> None:
        self._logger.info(
            "user_signed_up",
            user_id=user_id,
            username=username,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def signup_failed(self, username: str, error: str) -> None:
        self._logger.warning(
            "signup_failed",
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )

    def user_signed_in(self, user_id: int, second_factor_required: bool) -> None:
        self._logger.info(
            "user_signed_in",
            user_id=user_id,
            second_factor_required=second_factor_required,
            **self._get_context_kwargs(),
        )

    def sign_in_failed(self, identifier: str, reason: str) -> None:
        self._logger.warning(
            "sign_in_failed",
            identifier=identifier,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def account_locked(self, user_id: int, locked_until: datetime) -> None:
        self._logger.warning(
            "account_locked",
            user_id=user_id,
            locked_until=locked_until.isoformat(),
            **self._get_context_kwargs(),
        )

    def second_factor_enabled(self, user_id: int) -> None:
        self._logger.info(
            "second_factor_enabled",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def second_factor_disabled(self, user_id: int) -> None:
        self._logger.info(
            "second_factor_disabled",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def second_factor_change_failed(self, user_id: int, error: str) -> None:
        self._logger.warning(
            "second_factor_change_failed",
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )
