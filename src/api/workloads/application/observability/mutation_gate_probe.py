"""Domain probe for permission decisions made by the mutation gate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MutationGateProbe(Protocol):
    """Domain probe for mutation gate decisions."""

    def unauthenticated(self, reason: str) -> None:
        """Record a request rejected before any resource was loaded."""
        ...

    def access_granted(
        self, user_id: int, organization_id: int, required: str, level: str
    ) -> None:
        ...

    def access_denied(
        self, user_id: int, organization_id: int, required: str, level: str
    ) -> None:
        """Record a caller whose level is below what the operation needs.

        ``level`` is ``none`` when the organization is hidden from the caller.
        """
        ...

    def with_context(self, context: ObservationContext) -> MutationGateProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMutationGateProbe:
    """Default implementation of MutationGateProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultMutationGateProbe:
        """Create a new probe with observation context bound."""
        return DefaultMutationGateProbe(logger=self._logger, context=context)

    def unauthenticated(self, reason: str) -> None:
        self._logger.info(
            "mutation_unauthenticated",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def access_granted(
        self, user_id: int, organization_id: int, required: str, level: str
    ) -> None:
        self._logger.debug(
            "mutation_access_granted",
            user_id=user_id,
            organization_id=organization_id,
            required=required,
            level=level,
            **self._get_context_kwargs(),
        )

    def access_denied(
        self, user_id: int, organization_id: int, required: str, level: str
    ) -> None:
        self._logger.warning(
            "mutation_access_denied",
            user_id=user_id,
            organization_id=organization_id,
            required=required,
            level=level,
            **self._get_context_kwargs(),
        )
