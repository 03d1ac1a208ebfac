"""Fixtures shared by IAM unit tests."""

from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from iam.application.security import hash_password
from iam.domain.aggregates import Organization, User
from iam.domain.value_objects import OrganizationId, UserId
from iam.ports.repositories import (
    IAPIKeyRepository,
    IMembershipRepository,
    IOrganizationRepository,
    IUserRepository,
)
from infrastructure.settings import CredentialSettings
from shared_kernel.auth import SessionTokenCodec, SessionTokenProbe

PASSWORD = "correct horse battery"


@pytest.fixture
def credential_settings() -> CredentialSettings:
    """Low bcrypt cost so tests stay fast."""
    return CredentialSettings(
        bcrypt_rounds=4,
        max_failed_attempts=3,
        lockout_base_seconds=30,
        lockout_max_seconds=600,
    )


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(PASSWORD, rounds=4)


@pytest.fixture
def token_codec() -> SessionTokenCodec:
    return SessionTokenCodec(
        secret_key="unit-test-secret",
        probe=create_autospec(SessionTokenProbe, instance=True),
    )


@pytest.fixture
def mock_user_repository():
    return create_autospec(IUserRepository, instance=True)


@pytest.fixture
def mock_organization_repository():
    return create_autospec(IOrganizationRepository, instance=True)


@pytest.fixture
def mock_membership_repository():
    return create_autospec(IMembershipRepository, instance=True)


@pytest.fixture
def mock_api_key_repository():
    return create_autospec(IAPIKeyRepository, instance=True)


@pytest.fixture
def alice(password_hash) -> User:
    return User(
        id=UserId(value=1),
        username="alice",
        email="alice@example.com",
        name="Alice",
        password_hash=password_hash,
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def alice_personal_org() -> Organization:
    return Organization(
        id=OrganizationId(value=10),
        name="Personal",
        username="alice",
        is_personal=True,
        member_count=1,
    )
