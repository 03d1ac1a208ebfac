"""Organization and Membership aggregates for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from iam.domain.value_objects import (
    PERSONAL_ORGANIZATION_NAME,
    OrganizationId,
    UserId,
)
from shared_kernel.authorization.types import PermissionLevel


@dataclass(frozen=True)
class Organization:
    """Organization aggregate, the tenant that owns every workload resource.

    Business rules:
    - ``username`` is a globally unique handle
    - A personal organization is created together with its owner at signup
      and uses the owner's username as its handle
    - ``member_count`` is derived from memberships when loaded
    """

    id: OrganizationId | None
    name: str
    username: str
    is_personal: bool = False
    member_count: int = 0
    created_at: datetime | None = None

    @classmethod
    def personal_for(cls, username: str) -> Organization:
        """Factory for the personal organization created at signup."""
        return cls(
            id=None,
            name=PERSONAL_ORGANIZATION_NAME,
            username=username,
            is_personal=True,
        )

    @classmethod
    def create(cls, name: str, username: str) -> Organization:
        """Factory for a shared (non-personal) organization."""
        return cls(id=None, name=name, username=username, is_personal=False)

    def is_personal_owner(self, username: str) -> bool:
        """The owner of a personal organization is the user sharing its handle."""
        return self.is_personal and self.username == username


@dataclass(frozen=True)
class Membership:
    """A user's permission level on one organization.

    Unique per (user, organization). Levels are ordered, so comparisons use
    ``PermissionLevel`` directly.
    """

    user_id: UserId
    organization_id: OrganizationId
    level: PermissionLevel

    def __post_init__(self) -> None:
        if self.level == PermissionLevel.NONE:
            raise ValueError("A membership must grant at least read access")

    @property
    def is_admin(self) -> bool:
        return self.level == PermissionLevel.ADMIN

    def with_level(self, level: PermissionLevel) -> Membership:
        return replace(self, level=level)
