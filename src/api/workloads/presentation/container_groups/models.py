"""Pydantic models for container group and secret requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from workloads.domain.aggregates import ContainerGroup, Secret


class CreateContainerGroupRequest(BaseModel):
    """Deploy one of the application's components into an environment.

    ``size`` and ``container_count`` are checked against the allowed sets
    by the service, which reports every violation at once.
    """

    component_id: int = Field(..., ge=1)
    environment_id: int = Field(..., ge=1)
    size: str = Field(..., description="One of small, medium, large, xlarge")
    container_count: int = Field(..., description="Replica count, 1-10")


class ContainerGroupResponse(BaseModel):
    id: int
    component_id: int
    environment_id: int
    organization_id: int
    size: str
    container_count: int
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, container_group: ContainerGroup) -> ContainerGroupResponse:
        assert container_group.id is not None
        return cls(
            id=container_group.id.value,
            component_id=container_group.component_id.value,
            environment_id=container_group.environment_id.value,
            organization_id=container_group.organization_id,
            size=container_group.size.value,
            container_count=container_group.container_count,
            created_at=container_group.created_at,
        )


class AddSecretRequest(BaseModel):
    key: str = Field(..., description="Unique within the container group")
    value: str = Field(..., description="Stored exactly as given")


class EditSecretRequest(BaseModel):
    key: str | None = None
    value: str | None = None


class SecretResponse(BaseModel):
    id: int
    container_group_id: int
    key: str
    value: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, secret: Secret) -> SecretResponse:
        assert secret.id is not None
        return cls(
            id=secret.id.value,
            container_group_id=secret.container_group_id.value,
            key=secret.key,
            value=secret.value,
            created_at=secret.created_at,
            updated_at=secret.updated_at,
        )
