"""Pydantic models for environment requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from workloads.domain.aggregates import Environment


class CreateEnvironmentRequest(BaseModel):
    name: str = Field(..., description="Environment name, unique in the organization")


class EnvironmentResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, environment: Environment) -> EnvironmentResponse:
        assert environment.id is not None
        return cls(
            id=environment.id.value,
            organization_id=environment.organization_id,
            name=environment.name,
            created_at=environment.created_at,
        )
