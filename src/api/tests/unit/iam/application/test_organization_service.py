"""Unit tests for OrganizationService."""

from unittest.mock import AsyncMock, create_autospec

import pytest

from iam.application.observability import OrganizationServiceProbe
from iam.application.services import OrganizationService
from iam.domain.aggregates import Membership, Organization, User
from iam.domain.value_objects import OrganizationId, UserId
from iam.ports.exceptions import (
    DuplicateUsernameError,
    LastAdminError,
    MembershipNotFoundError,
    OrganizationNotFoundError,
    PersonalOwnerError,
    UserNotFoundError,
)
from shared_kernel.authorization import PermissionLevel
from shared_kernel.errors import UnauthorizedError, ValidationFailedError

ORG_ID = OrganizationId(value=10)
ALICE = UserId(value=1)
BOB = UserId(value=2)


@pytest.fixture
def mock_probe():
    return create_autospec(OrganizationServiceProbe, instance=True)


@pytest.fixture
def organization_service(
    mock_session,
    mock_organization_repository,
    mock_membership_repository,
    mock_user_repository,
    mock_probe,
):
    return OrganizationService(
        session=mock_session,
        organization_repository=mock_organization_repository,
        membership_repository=mock_membership_repository,
        user_repository=mock_user_repository,
        probe=mock_probe,
    )


@pytest.fixture
def bob() -> User:
    return User(id=BOB, username="bob", email="bob@example.com", name="Bob")


def caller_holds(mock_membership_repository, level: PermissionLevel) -> None:
    mock_membership_repository.get_level = AsyncMock(return_value=level)


@pytest.fixture
def shared_org(mock_organization_repository) -> Organization:
    org = Organization(id=ORG_ID, name="Acme", username="acme", member_count=2)
    mock_organization_repository.get_by_id = AsyncMock(return_value=org)
    return org


class TestCreateOrganization:
    async def test_creator_becomes_admin(
        self,
        organization_service,
        mock_organization_repository,
        mock_membership_repository,
        session_context,
    ):
        mock_organization_repository.get_by_username = AsyncMock(return_value=None)
        mock_organization_repository.add = AsyncMock(
            return_value=Organization(id=ORG_ID, name="Acme", username="acme")
        )

        org = await organization_service.create_organization(
            session_context, name=" Acme ", username="acme"
        )

        assert org.id == ORG_ID
        created: Organization = mock_organization_repository.add.await_args.args[0]
        assert created.name == "Acme"
        assert not created.is_personal
        mock_membership_repository.add.assert_awaited_once_with(
            Membership(
                user_id=ALICE, organization_id=ORG_ID, level=PermissionLevel.ADMIN
            )
        )

    async def test_handle_taken(
        self, organization_service, mock_organization_repository, session_context
    ):
        mock_organization_repository.get_by_username = AsyncMock(
            return_value=Organization(id=ORG_ID, name="Acme", username="acme")
        )

        with pytest.raises(DuplicateUsernameError):
            await organization_service.create_organization(
                session_context, "Acme", "acme"
            )

    async def test_invalid_handle(self, organization_service, session_context):
        with pytest.raises(ValidationFailedError):
            await organization_service.create_organization(
                session_context, "Acme", "no spaces allowed"
            )


class TestSetMemberLevel:
    async def test_adds_new_member(
        self,
        organization_service,
        mock_membership_repository,
        mock_user_repository,
        shared_org,
        bob,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_user_repository.get_by_id = AsyncMock(return_value=bob)
        mock_membership_repository.get = AsyncMock(return_value=None)

        membership = await organization_service.set_member_level(
            session_context, ORG_ID, BOB, PermissionLevel.READ
        )

        assert membership.level == PermissionLevel.READ
        mock_membership_repository.add.assert_awaited_once_with(membership)

    async def test_requires_admin(
        self,
        organization_service,
        mock_membership_repository,
        shared_org,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.WRITE)

        with pytest.raises(UnauthorizedError):
            await organization_service.set_member_level(
                session_context, ORG_ID, BOB, PermissionLevel.READ
            )

    async def test_non_member_sees_not_found(
        self,
        organization_service,
        mock_membership_repository,
        shared_org,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.NONE)

        with pytest.raises(OrganizationNotFoundError):
            await organization_service.set_member_level(
                session_context, ORG_ID, BOB, PermissionLevel.READ
            )

    async def test_unknown_target(
        self,
        organization_service,
        mock_membership_repository,
        mock_user_repository,
        shared_org,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_user_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(UserNotFoundError):
            await organization_service.set_member_level(
                session_context, ORG_ID, BOB, PermissionLevel.READ
            )

    async def test_cannot_demote_last_admin(
        self,
        organization_service,
        mock_membership_repository,
        mock_user_repository,
        shared_org,
        bob,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_user_repository.get_by_id = AsyncMock(return_value=bob)
        mock_membership_repository.get = AsyncMock(
            return_value=Membership(BOB, ORG_ID, PermissionLevel.ADMIN)
        )
        mock_membership_repository.count_admins = AsyncMock(return_value=1)

        with pytest.raises(LastAdminError):
            await organization_service.set_member_level(
                session_context, ORG_ID, BOB, PermissionLevel.WRITE
            )
        mock_membership_repository.set_level.assert_not_called()

    async def test_cannot_demote_personal_owner(
        self,
        organization_service,
        mock_membership_repository,
        mock_organization_repository,
        mock_user_repository,
        alice,
        session_context,
    ):
        mock_organization_repository.get_by_id = AsyncMock(
            return_value=Organization(
                id=ORG_ID, name="Personal", username="alice", is_personal=True
            )
        )
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_user_repository.get_by_id = AsyncMock(return_value=alice)
        mock_membership_repository.get = AsyncMock(
            return_value=Membership(ALICE, ORG_ID, PermissionLevel.ADMIN)
        )
        mock_membership_repository.count_admins = AsyncMock(return_value=2)

        with pytest.raises(PersonalOwnerError):
            await organization_service.set_member_level(
                session_context, ORG_ID, ALICE, PermissionLevel.READ
            )

    async def test_none_is_not_a_level(self, organization_service, session_context):
        with pytest.raises(ValidationFailedError):
            await organization_service.set_member_level(
                session_context, ORG_ID, BOB, PermissionLevel.NONE
            )


class TestRemoveMember:
    async def test_removes_member(
        self,
        organization_service,
        mock_membership_repository,
        mock_user_repository,
        shared_org,
        bob,
        session_context,
        mock_probe,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_membership_repository.get = AsyncMock(
            return_value=Membership(BOB, ORG_ID, PermissionLevel.WRITE)
        )
        mock_user_repository.get_by_id = AsyncMock(return_value=bob)

        await organization_service.remove_member(session_context, ORG_ID, BOB)

        mock_membership_repository.remove.assert_awaited_once_with(BOB, ORG_ID)
        mock_probe.member_removed.assert_called_once_with(10, 2)

    async def test_not_a_member(
        self,
        organization_service,
        mock_membership_repository,
        shared_org,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_membership_repository.get = AsyncMock(return_value=None)

        with pytest.raises(MembershipNotFoundError):
            await organization_service.remove_member(session_context, ORG_ID, BOB)

    async def test_last_admin_cannot_leave(
        self,
        organization_service,
        mock_membership_repository,
        mock_user_repository,
        shared_org,
        alice,
        session_context,
    ):
        caller_holds(mock_membership_repository, PermissionLevel.ADMIN)
        mock_membership_repository.get = AsyncMock(
            return_value=Membership(ALICE, ORG_ID, PermissionLevel.ADMIN)
        )
        mock_user_repository.get_by_id = AsyncMock(return_value=alice)
        mock_membership_repository.count_admins = AsyncMock(return_value=1)

        with pytest.raises(LastAdminError):
            await organization_service.remove_member(session_context, ORG_ID, ALICE)
