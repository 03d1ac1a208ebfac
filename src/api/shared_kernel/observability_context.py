"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events. Keys are prefixed so they never collide with the
    ``user_id`` or ``organization_id`` arguments a probe logs for the event
    itself.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        actor_id: Identifier of the identity performing the operation.
        grant_kind: How the caller authenticated (session, api_key).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", actor_id="42")
        probe = DefaultMutationGateProbe().with_context(context)
    """

    request_id: str | None = None
    actor_id: str | None = None
    grant_kind: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.actor_id is not None:
            result["actor_id"] = self.actor_id
        if self.grant_kind is not None:
            result["grant_kind"] = self.grant_kind
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            actor_id=self.actor_id,
            grant_kind=self.grant_kind,
            extra={**self.extra, **kwargs},
        )
