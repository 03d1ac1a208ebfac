"""Pydantic models for organization and membership requests."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from iam.domain.aggregates import Membership, Organization


class CreateOrganizationRequest(BaseModel):
    name: str = Field(..., description="Display name (1-50 characters)")
    username: str = Field(..., description="Unique handle (3-20 characters)")


class SetMemberLevelRequest(BaseModel):
    level: Literal["read", "write", "admin"] = Field(
        ..., description="Permission level to grant"
    )


class OrganizationResponse(BaseModel):
    id: int
    name: str
    username: str
    is_personal: bool
    member_count: int
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, organization: Organization) -> OrganizationResponse:
        assert organization.id is not None
        return cls(
            id=organization.id.value,
            name=organization.name,
            username=organization.username,
            is_personal=organization.is_personal,
            member_count=organization.member_count,
            created_at=organization.created_at,
        )


class MembershipResponse(BaseModel):
    user_id: int
    organization_id: int
    level: str

    @classmethod
    def from_domain(cls, membership: Membership) -> MembershipResponse:
        return cls(
            user_id=membership.user_id.value,
            organization_id=membership.organization_id.value,
            level=membership.level.label,
        )
