"""Authorization provider protocol.

Defines the interface bounded contexts use to ask what an identity may do
in an organization, without depending on how memberships are stored.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.authorization.types import PermissionLevel


@runtime_checkable
class AuthorizationProvider(Protocol):
    """Protocol for permission evaluation.

    The primary implementation reads the memberships table inside the
    caller's transaction, so a check and the mutation it guards see the
    same snapshot.
    """

    async def get_permission_level(
        self,
        user_id: int,
        organization_id: int,
    ) -> PermissionLevel:
        """Resolve the level an identity holds on an organization.

        Args:
            user_id: Numeric identity id
            organization_id: Numeric organization id

        Returns:
            The membership level, or PermissionLevel.NONE without a membership
        """
        ...

    async def check_permission(
        self,
        user_id: int,
        organization_id: int,
        required: PermissionLevel,
    ) -> bool:
        """Check whether an identity holds at least ``required``.

        Args:
            user_id: Numeric identity id
            organization_id: Numeric organization id
            required: Minimum level needed

        Returns:
            True if the resolved level is >= required
        """
        ...
