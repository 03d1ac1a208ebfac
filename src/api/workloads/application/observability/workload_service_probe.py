"""Protocol for workload application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WorkloadServiceProbe(Protocol):
    """Domain probe shared by the environment, application and container
    group services.

    ``resource`` is the kind of record touched, e.g. ``"application"``.
    """

    def resource_created(
        self, resource: str, resource_id: int, organization_id: int
    ) -> None:
        ...

    def resource_updated(self, resource: str, resource_id: int) -> None:
        ...

    def resource_deleted(self, resource: str, resource_id: int) -> None:
        """Record a delete; descendants went with it."""
        ...

    def mutation_failed(self, operation: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> WorkloadServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultWorkloadServiceProbe:
    """Default implementation of WorkloadServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultWorkloadServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultWorkloadServiceProbe(logger=self._logger, context=context)

    def resource_created(
        self, resource: str, resource_id: int, organization_id: int
    ) -> None:
        self._logger.info(
            f"{resource}_created",
            resource_id=resource_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def resource_updated(self, resource: str, resource_id: int) -> None:
        self._logger.info(
            f"{resource}_updated",
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def resource_deleted(self, resource: str, resource_id: int) -> None:
        self._logger.info(
            f"{resource}_deleted",
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def mutation_failed(self, operation: str, error: str) -> None:
        self._logger.warning(
            "workload_mutation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
