"""Pydantic models for application and component requests and responses.

Update requests are partial: a field that is omitted or null is left
unchanged.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from workloads.domain.aggregates import Application, Component


class CreateApplicationRequest(BaseModel):
    name: str = Field(..., description="Application name (1-50 characters)")
    description: str = Field("", description="Free-form description")


class UpdateApplicationRequest(BaseModel):
    name: str | None = None
    description: str | None = None


class ApplicationResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    description: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, application: Application) -> ApplicationResponse:
        assert application.id is not None
        return cls(
            id=application.id.value,
            organization_id=application.organization_id,
            name=application.name,
            description=application.description,
            created_at=application.created_at,
            updated_at=application.updated_at,
        )


class CreateComponentRequest(BaseModel):
    name: str = Field(..., description="Component name (1-50 characters)")
    image: str = Field(..., description="Container image reference, e.g. repo/api:1")
    deployment_strategy: str = Field(
        "rolling", description="Either 'rolling' or 'recreate'"
    )


class UpdateComponentRequest(BaseModel):
    name: str | None = None
    image: str | None = None
    deployment_strategy: str | None = None


class ComponentResponse(BaseModel):
    id: int
    application_id: int
    name: str
    image: str
    deployment_strategy: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, component: Component) -> ComponentResponse:
        assert component.id is not None
        return cls(
            id=component.id.value,
            application_id=component.application_id.value,
            name=component.name,
            image=component.image,
            deployment_strategy=component.deployment_strategy.value,
            created_at=component.created_at,
            updated_at=component.updated_at,
        )
