"""Environment aggregate for the workloads context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from workloads.domain.value_objects import EnvironmentId


@dataclass(frozen=True)
class Environment:
    """A placement target owned by an organization.

    Container groups are deployed into exactly one environment, which must
    belong to the same organization as the group's application.
    """

    id: EnvironmentId | None
    organization_id: int
    name: str
    created_at: datetime | None = None

    @classmethod
    def create(cls, organization_id: int, name: str) -> Environment:
        return cls(id=None, organization_id=organization_id, name=name)
