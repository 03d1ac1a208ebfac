"""Domain probe for workload repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WorkloadRepositoryProbe(Protocol):
    """Domain probe for workload persistence."""

    def record_saved(self, resource: str, resource_id: int) -> None:
        ...

    def records_deleted(self, resource: str, resource_id: int, rows: int) -> None:
        """Record a delete; ``rows`` counts the descendants removed with it."""
        ...

    def record_missing(self, resource: str, resource_id: int) -> None:
        """Record a scoped update or delete that matched no row."""
        ...

    def duplicate_rejected(self, resource: str, detail: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> WorkloadRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultWorkloadRepositoryProbe:
    """Default implementation of WorkloadRepositoryProbe using structlog."""

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
    ) -> DefaultWorkloadRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultWorkloadRepositoryProbe(logger=self._logger, context=context)

    def record_saved(self, resource: str, resource_id: int) -> None:
        self._logger.debug(
            "workload_record_saved",
            resource=resource,
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def records_deleted(self, resource: str, resource_id: int, rows: int) -> None:
        self._logger.info(
            "workload_records_deleted",
            resource=resource,
            resource_id=resource_id,
            descendant_rows=rows,
            **self._get_context_kwargs(),
        )

    def record_missing(self, resource: str, resource_id: int) -> None:
        self._logger.debug(
            "workload_record_missing",
            resource=resource,
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def duplicate_rejected(self, resource: str, detail: str) -> None:
        self._logger.warning(
            "workload_duplicate_rejected",
            resource=resource,
            detail=detail,
            **self._get_context_kwargs(),
        )
