"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user, organization and membership
repository operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: int, username: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_not_found(self, lookup: str) -> None:
        """Record that a lookup by id, username or email found nothing."""
        ...

    def duplicate_user(self, constraint: str) -> None:
        """Record that an insert hit a uniqueness constraint."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class OrganizationRepositoryProbe(Protocol):
    """Domain probe for organization and membership repository operations."""

    def organization_saved(self, organization_id: int, username: str) -> None:
        ...

    def organization_not_found(self, lookup: str) -> None:
        ...

    def membership_saved(self, organization_id: int, user_id: int, level: str) -> None:
        ...

    def membership_removed(self, organization_id: int, user_id: int) -> None:
        ...

    def duplicate_handle(self, username: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> OrganizationRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: int, username: str) -> None:
        """Record that a user was successfully saved."""
        self._logger.info(
            "user_saved",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, lookup: str) -> None:
        self._logger.debug(
            "user_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def duplicate_user(self, constraint: str) -> None:
        self._logger.warning(
            "duplicate_user",
            constraint=constraint,
            **self._get_context_kwargs(),
        )


class DefaultOrganizationRepositoryProbe:
    """Default implementation of OrganizationRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultOrganizationRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultOrganizationRepositoryProbe(logger=self._logger, context=context)

    def organization_saved(self, organization_id: int, username: str) -> None:
        self._logger.info(
            "organization_saved",
            organization_id=organization_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def organization_not_found(self, lookup: str) -> None:
        self._logger.debug(
            "organization_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def membership_saved(self, organization_id: int, user_id: int, level: str) -> None:
        self._logger.info(
            "membership_saved",
            organization_id=organization_id,
            user_id=user_id,
            level=level,
            **self._get_context_kwargs(),
        )

    def membership_removed(self, organization_id: int, user_id: int) -> None:
        self._logger.info(
            "membership_removed",
            organization_id=organization_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def duplicate_handle(self, username: str) -> None:
        self._logger.warning(
            "duplicate_organization_handle",
            username=username,
            **self._get_context_kwargs(),
        )
