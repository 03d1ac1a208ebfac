"""Protocol for organization application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OrganizationServiceProbe(Protocol):
    """Domain probe for organization and membership operations."""

    def organization_created(
        self, organization_id: int, username: str, creator_id: int
    ) -> None:
        ...

    def organization_creation_failed(self, username: str, error: str) -> None:
        ...

    def member_added(self, organization_id: int, user_id: int, level: str) -> None:
        ...

    def member_level_changed(
        self, organization_id: int, user_id: int, level: str
    ) -> None:
        ...

    def member_removed(self, organization_id: int, user_id: int) -> None:
        ...

    def membership_change_failed(
        self, organization_id: int, user_id: int, error: str
    ) -> None:
        ...

    def with_context(self, context: ObservationContext) -> OrganizationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultOrganizationServiceProbe:
    """Default implementation of OrganizationServiceProbe using structlog."""

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
    ) -> DefaultOrganizationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultOrganizationServiceProbe(logger=self._logger, context=context)

    def organization_created(
        self, organization_id: int, username: str, creator_id: int
    ) -> None:
        self._logger.info(
            "organization_created",
            organization_id=organization_id,
            username=username,
            creator_id=creator_id,
            **self._get_context_kwargs(),
        )

    def organization_creation_failed(self, username: str, error: str) -> None:
        self._logger.warning(
            "organization_creation_failed",
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )

    def member_added(self, organization_id: int, user_id: int, level: str) -> None:
        self._logger.info(
            "member_added",
            organization_id=organization_id,
            user_id=user_id,
            level=level,
            **self._get_context_kwargs(),
        )

    def member_level_changed(
        self, organization_id: int, user_id: int, level: str
    ) -> None:
        self._logger.info(
            "member_level_changed",
            organization_id=organization_id,
            user_id=user_id,
            level=level,
            **self._get_context_kwargs(),
        )

    def member_removed(self, organization_id: int, user_id: int) -> None:
        self._logger.info(
            "member_removed",
            organization_id=organization_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def membership_change_failed(
        self, organization_id: int, user_id: int, error: str
    ) -> None:
        self._logger.warning(
            "membership_change_failed",
            organization_id=organization_id,
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )
