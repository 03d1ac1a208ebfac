"""Organization application service for IAM bounded context.

Manages shared organizations and their access-control list. Personal
organizations are created by signup, never here.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from iam.domain.aggregates import Membership, Organization
from iam.domain.validation import validate_organization
from iam.domain.value_objects import OrganizationId, UserId
from iam.ports.exceptions import (
    DuplicateUsernameError,
    LastAdminError,
    MembershipNotFoundError,
    OrganizationNotFoundError,
    PersonalOwnerError,
    UserNotFoundError,
)
from iam.ports.repositories import (
    IMembershipRepository,
    IOrganizationRepository,
    IUserRepository,
)
from shared_kernel.auth.context import RequestContext
from shared_kernel.authorization.types import PermissionLevel
from shared_kernel.errors import UnauthorizedError, ValidationFailedError


class OrganizationService:
    """Application service for organizations and memberships.

    Membership changes require the caller to be an admin of the
    organization. Callers without any membership get the same
    ``OrganizationNotFoundError`` as for a missing organization.
    """

    def __init__(
        self,
        session: AsyncSession,
        organization_repository: IOrganizationRepository,
        membership_repository: IMembershipRepository,
        user_repository: IUserRepository,
        probe: OrganizationServiceProbe | None = None,
    ):
        self._session = session
        self._organization_repository = organization_repository
        self._membership_repository = membership_repository
        self._user_repository = user_repository
        self._probe = probe or DefaultOrganizationServiceProbe()

    async def create_organization(
        self, context: RequestContext, name: str, username: str
    ) -> Organization:
        """Create a shared organization with the caller as its first admin.

        Args:
            context: The caller; must hold a full grant
            name: Display name
            username: Unique handle

        Raises:
            ValidationFailedError: If name or handle is malformed
            DuplicateUsernameError: If the handle is taken
        """
        creator_id = UserId(value=context.require_full_grant())
        name = name.strip()
        validate_organization(name=name, username=username)

        try:
            async with self._session.begin():
                if await self._organization_repository.get_by_username(username):
                    raise DuplicateUsernameError(
                        f"Organization handle '{username}' is already taken"
                    )
                organization = await self._organization_repository.add(
                    Organization.create(name=name, username=username)
                )
                assert organization.id is not None
                await self._membership_repository.add(
                    Membership(
                        user_id=creator_id,
                        organization_id=organization.id,
                        level=PermissionLevel.ADMIN,
                    )
                )
        except Exception as e:
            self._probe.organization_creation_failed(username=username, error=str(e))
            raise

        self._probe.organization_created(
            organization_id=organization.id.value,
            username=username,
            creator_id=creator_id.value,
        )
        return organization

    async def list_organizations(self, context: RequestContext) -> list[Organization]:
        """List the organizations the caller belongs to."""
        user_id = UserId(value=context.require_full_grant())
        async with self._session.begin():
            return await self._organization_repository.list_for_user(user_id)

    async def set_member_level(
        self,
        context: RequestContext,
        organization_id: OrganizationId,
        user_id: UserId,
        level: PermissionLevel,
    ) -> Membership:
        """Add a member, or change an existing member's level.

        Raises:
            OrganizationNotFoundError: If the caller cannot see the organization
            UnauthorizedError: If the caller is not an admin
            UserNotFoundError: If the target identity does not exist
            PersonalOwnerError: If this would downgrade a personal owner
            LastAdminError: If this would remove the last admin
        """
        if level == PermissionLevel.NONE:
            raise ValidationFailedError([("level", "must be read, write or admin")])

        try:
            async with self._session.begin():
                organization = await self._require_admin(context, organization_id)
                target = await self._user_repository.get_by_id(user_id)
                if target is None:
                    raise UserNotFoundError(f"User {user_id.value} not found")

                membership = Membership(
                    user_id=user_id, organization_id=organization_id, level=level
                )
                existing = await self._membership_repository.get(
                    user_id, organization_id
                )
                if existing is None:
                    await self._membership_repository.add(membership)
                    self._probe.member_added(
                        organization_id.value, user_id.value, level.label
                    )
                    return membership

                if existing.is_admin and level < PermissionLevel.ADMIN:
                    if organization.is_personal_owner(target.username):
                        raise PersonalOwnerError(
                            "The owner of a personal organization must stay admin"
                        )
                    await self._ensure_other_admin(organization_id)

                await self._membership_repository.set_level(membership)
        except Exception as e:
            self._probe.membership_change_failed(
                organization_id.value, user_id.value, error=str(e)
            )
            raise

        self._probe.member_level_changed(
            organization_id.value, user_id.value, level.label
        )
        return membership

    async def remove_member(
        self,
        context: RequestContext,
        organization_id: OrganizationId,
        user_id: UserId,
    ) -> None:
        """Remove a member from an organization.

        Raises:
            OrganizationNotFoundError: If the caller cannot see the organization
            UnauthorizedError: If the caller is not an admin
            MembershipNotFoundError: If the user is not a member
            PersonalOwnerError: If the user owns this personal organization
            LastAdminError: If the user is the last admin
        """
        try:
            async with self._session.begin():
                organization = await self._require_admin(context, organization_id)
                existing = await self._membership_repository.get(
                    user_id, organization_id
                )
                if existing is None:
                    raise MembershipNotFoundError(
                        f"User {user_id.value} is not a member"
                    )
                target = await self._user_repository.get_by_id(user_id)
                if target is not None and organization.is_personal_owner(
                    target.username
                ):
                    raise PersonalOwnerError(
                        "The owner of a personal organization cannot be removed"
                    )
                if existing.is_admin:
                    await self._ensure_other_admin(organization_id)
                await self._membership_repository.remove(user_id, organization_id)
        except Exception as e:
            self._probe.membership_change_failed(
                organization_id.value, user_id.value, error=str(e)
            )
            raise

        self._probe.member_removed(organization_id.value, user_id.value)

    async def _require_admin(
        self, context: RequestContext, organization_id: OrganizationId
    ) -> Organization:
        caller_id = UserId(value=context.require_full_grant())
        level = await self._membership_repository.get_level(caller_id, organization_id)
        organization = await self._organization_repository.get_by_id(organization_id)
        if organization is None or level == PermissionLevel.NONE:
            raise OrganizationNotFoundError(
                f"Organization {organization_id.value} not found"
            )
        if level < PermissionLevel.ADMIN:
            raise UnauthorizedError("Admin access to the organization is required")
        return organization

    async def _ensure_other_admin(self, organization_id: OrganizationId) -> None:
        if await self._membership_repository.count_admins(organization_id) <= 1:
            raise LastAdminError("An organization must keep at least one admin")
