"""Domain probe for permission evaluation against memberships."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MembershipAuthorizationProbe(Protocol):
    """Domain probe for permission lookups."""

    def permission_evaluated(
        self, user_id: int, organization_id: int, level: str
    ) -> None:
        ...

    def permission_checked(
        self, user_id: int, organization_id: int, required: str, granted: bool
    ) -> None:
        ...

    def with_context(
        self, context: ObservationContext
    ) -> MembershipAuthorizationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMembershipAuthorizationProbe:
    """Default implementation of MembershipAuthorizationProbe using structlog."""

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
    ) -> DefaultMembershipAuthorizationProbe:
        """Create a new probe with observation context bound."""
        return DefaultMembershipAuthorizationProbe(logger=self._logger, context=context)

    def permission_evaluated(
        self, user_id: int, organization_id: int, level: str
    ) -> None:
        self._logger.debug(
            "permission_evaluated",
            user_id=user_id,
            organization_id=organization_id,
            level=level,
            **self._get_context_kwargs(),
        )

    def permission_checked(
        self, user_id: int, organization_id: int, required: str, granted: bool
    ) -> None:
        self._logger.debug(
            "permission_checked",
            user_id=user_id,
            organization_id=organization_id,
            required=required,
            granted=granted,
            **self._get_context_kwargs(),
        )
