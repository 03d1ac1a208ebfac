"""Domain probe for API key management.

Key secrets never reach the log; only the key id and its public prefix do.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class APIKeyServiceProbe(Protocol):
    """Domain events raised while owners manage their API keys."""

    def api_key_issued(self, api_key_id: str, owner_id: int, prefix: str) -> None:
        """A new key was stored and its secret handed to the owner."""
        ...

    def api_keys_listed(self, owner_id: int, total: int, active: int) -> None: ...

    def api_key_revoked(self, api_key_id: str, owner_id: int) -> None: ...

    def management_refused(self, owner_id: int, grant_kind: str) -> None:
        """A non-session grant tried to manage keys."""
        ...

    def operation_failed(self, operation: str, owner_id: int, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> APIKeyServiceProbe: ...


class DefaultAPIKeyServiceProbe:
    """structlog implementation of APIKeyServiceProbe."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        return {} if self._context is None else self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAPIKeyServiceProbe:
        return DefaultAPIKeyServiceProbe(logger=self._logger, context=context)

    def api_key_issued(self, api_key_id: str, owner_id: int, prefix: str) -> None:
        self._logger.info(
            "api_key_issued",
            api_key_id=api_key_id,
            owner_id=owner_id,
            prefix=prefix,
            **self._get_context_kwargs(),
        )

    def api_keys_listed(self, owner_id: int, total: int, active: int) -> None:
        self._logger.debug(
            "api_keys_listed",
            owner_id=owner_id,
            total=total,
            active=active,
            **self._get_context_kwargs(),
        )

    def api_key_revoked(self, api_key_id: str, owner_id: int) -> None:
        self._logger.info(
            "api_key_revoked",
            api_key_id=api_key_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def management_refused(self, owner_id: int, grant_kind: str) -> None:
        self._logger.warning(
            "api_key_management_refused",
            owner_id=owner_id,
            grant_kind=grant_kind,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, owner_id: int, error: str) -> None:
        self._logger.error(
            "api_key_operation_failed",
            operation=operation,
            owner_id=owner_id,
            error=error,
            **self._get_context_kwargs(),
        )
