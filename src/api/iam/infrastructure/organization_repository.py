"""SQLAlchemy implementations of IOrganizationRepository and
IMembershipRepository.

Member counts are derived from the memberships table on every read, never
stored.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Membership, Organization
from iam.domain.value_objects import OrganizationId, UserId
from iam.infrastructure.models import MembershipModel, OrganizationModel
from iam.infrastructure.observability import (
    DefaultOrganizationRepositoryProbe,
    OrganizationRepositoryProbe,
)
from iam.ports.exceptions import DuplicateUsernameError
from iam.ports.repositories import IMembershipRepository, IOrganizationRepository
from infrastructure.database import as_utc
from shared_kernel.authorization.types import PermissionLevel
from shared_kernel.errors import ConflictError


def _member_count():
    return (
        select(func.count())
        .where(MembershipModel.organization_id == OrganizationModel.id)
        .correlate(OrganizationModel)
        .scalar_subquery()
    )


class OrganizationRepository(IOrganizationRepository):
    """Database-backed repository for Organization aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: OrganizationRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultOrganizationRepositoryProbe()

    async def add(self, organization: Organization) -> Organization:
        """Insert an organization and return it with its assigned id.

        Raises:
            DuplicateUsernameError: If the handle is taken
        """
        model = OrganizationModel(
            name=organization.name,
            username=organization.username,
            is_personal=organization.is_personal,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._probe.duplicate_handle(organization.username)
            raise DuplicateUsernameError(
                f"Handle '{organization.username}' is already taken"
            ) from e

        self._probe.organization_saved(model.id, model.username)
        return self._to_aggregate(model, member_count=0)

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        return await self._get_one(
            OrganizationModel.id == organization_id.value,
            lookup=f"id:{organization_id.value}",
        )

    async def get_by_username(self, username: str) -> Organization | None:
        return await self._get_one(
            OrganizationModel.username == username, lookup=f"username:{username}"
        )

    async def list_for_user(self, user_id: UserId) -> list[Organization]:
        stmt = (
            select(OrganizationModel, _member_count())
            .join(
                MembershipModel,
                MembershipModel.organization_id == OrganizationModel.id,
            )
            .where(MembershipModel.user_id == user_id.value)
            .order_by(OrganizationModel.id)
        )
        result = await self._session.execute(stmt)
        return [
            self._to_aggregate(model, member_count=count)
            for model, count in result.all()
        ]

    async def _get_one(self, condition, lookup: str) -> Organization | None:
        stmt = select(OrganizationModel, _member_count()).where(condition)
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            self._probe.organization_not_found(lookup)
            return None
        model, count = row
        return self._to_aggregate(model, member_count=count)

    def _to_aggregate(
        self, model: OrganizationModel, member_count: int
    ) -> Organization:
        """Convert SQLAlchemy model to domain aggregate."""
        return Organization(
            id=OrganizationId(value=model.id),
            name=model.name,
            username=model.username,
            is_personal=model.is_personal,
            member_count=member_count,
            created_at=as_utc(model.created_at),
        )


class MembershipRepository(IMembershipRepository):
    """Database-backed access-control list of (user, organization, level)."""

    def __init__(
        self,
        session: AsyncSession,
        probe: OrganizationRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultOrganizationRepositoryProbe()

    async def add(self, membership: Membership) -> None:
        """Insert a membership.

        Raises:
            ConflictError: If the user is already a member
        """
        self._session.add(
            MembershipModel(
                user_id=membership.user_id.value,
                organization_id=membership.organization_id.value,
                level=membership.level.label,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictError("User is already a member") from e

        self._probe.membership_saved(
            membership.organization_id.value,
            membership.user_id.value,
            membership.level.label,
        )

    async def get(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> Membership | None:
        stmt = select(MembershipModel.level).where(
            MembershipModel.user_id == user_id.value,
            MembershipModel.organization_id == organization_id.value,
        )
        label = (await self._session.execute(stmt)).scalar_one_or_none()
        if label is None:
            return None
        return Membership(
            user_id=user_id,
            organization_id=organization_id,
            level=PermissionLevel.from_label(label),
        )

    async def get_level(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> PermissionLevel:
        membership = await self.get(user_id, organization_id)
        return membership.level if membership else PermissionLevel.NONE

    async def set_level(self, membership: Membership) -> None:
        await self._session.execute(
            update(MembershipModel)
            .where(
                MembershipModel.user_id == membership.user_id.value,
                MembershipModel.organization_id == membership.organization_id.value,
            )
            .values(level=membership.level.label)
        )
        self._probe.membership_saved(
            membership.organization_id.value,
            membership.user_id.value,
            membership.level.label,
        )

    async def remove(self, user_id: UserId, organization_id: OrganizationId) -> bool:
        result = await self._session.execute(
            delete(MembershipModel).where(
                MembershipModel.user_id == user_id.value,
                MembershipModel.organization_id == organization_id.value,
            )
        )
        if result.rowcount == 0:
            return False
        self._probe.membership_removed(organization_id.value, user_id.value)
        return True

    async def count_admins(self, organization_id: OrganizationId) -> int:
        """Count the admins, locking their membership rows.

        The locks last until the transaction ends, so two admins demoting
        each other at once are counted one after the other. Postgres refuses
        FOR UPDATE on an aggregate, so the rows are counted here.
        """
        stmt = (
            select(MembershipModel.user_id)
            .where(
                MembershipModel.organization_id == organization_id.value,
                MembershipModel.level == PermissionLevel.ADMIN.label,
            )
            .with_for_update()
        )
        return len((await self._session.execute(stmt)).scalars().all())
