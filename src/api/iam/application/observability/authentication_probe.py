"""Domain probe for grant resolution.

A grant is the credential a request presented: a session token or an API key.
Rejections carry a short machine-readable reason, never the credential.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for resolving credentials into request contexts."""

    def grant_resolved(self, grant_kind: str, user_id: int, phase: str) -> None:
        ...

    def grant_rejected(self, grant_kind: str, reason: str) -> None:
        """A credential was presented but did not resolve.

        Reasons include ``invalid_token``, ``phase:<phase>``,
        ``identity_missing``, ``not_found``, ``revoked`` and ``owner_missing``.
        """
        ...

    def second_factor_completed(self, user_id: int) -> None:
        """A pending session was upgraded to a full one."""
        ...

    def second_factor_failed(self, user_id: int | None, reason: str) -> None: ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe: ...


class DefaultAuthenticationProbe:
    """structlog implementation of AuthenticationProbe."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        return {} if self._context is None else self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def grant_resolved(self, grant_kind: str, user_id: int, phase: str) -> None:
        self._logger.debug(
            "grant_resolved",
            grant_kind=grant_kind,
            user_id=user_id,
            phase=phase,
            **self._get_context_kwargs(),
        )

    def grant_rejected(self, grant_kind: str, reason: str) -> None:
        self._logger.warning(
            "grant_rejected",
            grant_kind=grant_kind,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def second_factor_completed(self, user_id: int) -> None:
        self._logger.info(
            "second_factor_completed",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def second_factor_failed(self, user_id: int | None, reason: str) -> None:
        self._logger.warning(
            "second_factor_failed",
            user_id=user_id,
            reason=reason,
            **self._get_context_kwargs(),
        )
