"""Domain probe for API key storage.

Only key ids and counts are recorded. A prefix is part of the secret, so it is
never logged here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class APIKeyRepositoryProbe(Protocol):
    """Domain probe for API key persistence."""

    def api_key_stored(self, api_key_id: str, owner_id: int, revoked: bool) -> None:
        ...

    def api_key_missing(self, api_key_id: str, owner_id: int) -> None: ...

    def prefix_shared(self, candidates: int) -> None:
        """More than one stored key matched a secret's prefix."""
        ...

    def with_context(self, context: ObservationContext) -> APIKeyRepositoryProbe: ...


class DefaultAPIKeyRepositoryProbe:
    """structlog implementation of APIKeyRepositoryProbe."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        return {} if self._context is None else self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAPIKeyRepositoryProbe:
        return DefaultAPIKeyRepositoryProbe(logger=self._logger, context=context)

    def api_key_stored(self, api_key_id: str, owner_id: int, revoked: bool) -> None:
        self._logger.debug(
            "api_key_stored",
            api_key_id=api_key_id,
            owner_id=owner_id,
            revoked=revoked,
            **self._get_context_kwargs(),
        )

    def api_key_missing(self, api_key_id: str, owner_id: int) -> None:
        self._logger.debug(
            "api_key_missing",
            api_key_id=api_key_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def prefix_shared(self, candidates: int) -> None:
        self._logger.warning(
            "api_key_prefix_shared",
            candidates=candidates,
            **self._get_context_kwargs(),
        )
