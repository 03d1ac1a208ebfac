"""Permission evaluation backed by the memberships table.

Implements the shared-kernel ``AuthorizationProvider`` so that other bounded
contexts can ask "what level does this identity hold on this organization"
without importing IAM.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.infrastructure.models import MembershipModel
from iam.infrastructure.observability import (
    DefaultMembershipAuthorizationProbe,
    MembershipAuthorizationProbe,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import PermissionLevel


class MembershipAuthorizationProvider(AuthorizationProvider):
    """Reads permission levels from memberships.

    Runs on the caller's session, so a check made inside a unit of work sees
    the same snapshot as the mutation that follows it.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: MembershipAuthorizationProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultMembershipAuthorizationProbe()

    async def get_permission_level(
        self, user_id: int, organization_id: int
    ) -> PermissionLevel:
        """Return the identity's level, ``NONE`` without a membership."""
        stmt = select(MembershipModel.level).where(
            MembershipModel.user_id == user_id,
            MembershipModel.organization_id == organization_id,
        )
        label = (await self._session.execute(stmt)).scalar_one_or_none()
        level = (
            PermissionLevel.NONE if label is None else PermissionLevel.from_label(label)
        )
        self._probe.permission_evaluated(user_id, organization_id, level.label)
        return level

    async def check_permission(
        self, user_id: int, organization_id: int, required: PermissionLevel
    ) -> bool:
        level = await self.get_permission_level(user_id, organization_id)
        granted = level.satisfies(required)
        self._probe.permission_checked(
            user_id, organization_id, required.label, granted
        )
        return granted
