"""Integration tests for signup atomicity and uniqueness."""

import pytest

from iam.infrastructure.models import MembershipModel, OrganizationModel, UserModel
from iam.infrastructure.organization_repository import MembershipRepository
from iam.ports.exceptions import DuplicateEmailError, DuplicateUsernameError
from shared_kernel.authorization import PermissionLevel

pytestmark = pytest.mark.integration


async def test_signup_creates_personal_organization(dockyard):
    result = await dockyard.users().sign_up(
        "alice", "Alice", "alice@example.com", "correct horse battery"
    )

    assert result.organization.username == "alice"
    assert result.organization.is_personal
    assert (
        await dockyard.permission_level(
            result.user.id.value, result.organization.id.value
        )
        is PermissionLevel.ADMIN
    )


async def test_failed_membership_leaves_nothing_behind(dockyard, monkeypatch):
    async def unavailable(self, membership):
        raise RuntimeError("membership store unavailable")

    monkeypatch.setattr(MembershipRepository, "add", unavailable)

    with pytest.raises(RuntimeError):
        await dockyard.users().sign_up(
            "alice", "Alice", "alice@example.com", "correct horse battery"
        )

    for model in (UserModel, OrganizationModel, MembershipModel):
        assert await dockyard.count(model) == 0


async def test_username_and_email_are_unique(dockyard):
    await dockyard.sign_up("alice")

    with pytest.raises(DuplicateUsernameError):
        await dockyard.users().sign_up(
            "alice", "Other", "other@example.com", "correct horse battery"
        )
    with pytest.raises(DuplicateEmailError):
        await dockyard.users().sign_up(
            "alicia", "Alicia", "ALICE@example.com", "correct horse battery"
        )
    assert await dockyard.count(UserModel) == 1
