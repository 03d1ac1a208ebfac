"""ContainerGroup and Secret records for the workloads context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from workloads.domain.value_objects import (
    ALLOWED_CONTAINER_COUNTS,
    ComponentId,
    ContainerGroupId,
    ContainerSize,
    EnvironmentId,
    SecretId,
)


@dataclass(frozen=True)
class ContainerGroup:
    """A component deployed into an environment.

    ``organization_id`` duplicates the owning application's organization so
    a permission check on a group needs no walk up the hierarchy. It is set
    once from the loaded application and never taken from caller input.
    """

    id: ContainerGroupId | None
    component_id: ComponentId
    environment_id: EnvironmentId
    organization_id: int
    size: ContainerSize
    container_count: int
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.container_count not in ALLOWED_CONTAINER_COUNTS:
            raise ValueError(f"Invalid container count: {self.container_count}")

    @classmethod
    def create(
        cls,
        component_id: ComponentId,
        environment_id: EnvironmentId,
        organization_id: int,
        size: ContainerSize,
        container_count: int,
    ) -> ContainerGroup:
        return cls(
            id=None,
            component_id=component_id,
            environment_id=environment_id,
            organization_id=organization_id,
            size=size,
            container_count=container_count,
        )


@dataclass(frozen=True)
class Secret:
    """A runtime secret injected into a container group.

    The value is stored as given. Keys are unique within a container group.
    """

    id: SecretId | None
    container_group_id: ContainerGroupId
    key: str
    value: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls, container_group_id: ContainerGroupId, key: str, value: str
    ) -> Secret:
        return cls(id=None, container_group_id=container_group_id, key=key, value=value)

    def with_changes(self, key: str | None = None, value: str | None = None) -> Secret:
        return replace(
            self,
            key=self.key if key is None else key,
            value=self.value if value is None else value,
        )
