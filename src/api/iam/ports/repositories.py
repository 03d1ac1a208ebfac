"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations share the caller's database session, so every
call joins the transaction the application service has opened.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import APIKey, Membership, Organization, User
from iam.domain.value_objects import APIKeyId, OrganizationId, UserId
from shared_kernel.authorization.types import PermissionLevel


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def add(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: A user with ``id`` None

        Returns:
            The persisted user with its assigned id

        Raises:
            DuplicateUsernameError: If the username is taken
            DuplicateEmailError: If the email is taken
        """
        ...

    async def update(self, user: User) -> User:
        """Persist changes to credentials or lockout state of an existing user."""
        ...

    async def increment_failed_attempts(self, user_id: UserId) -> int:
        """Count one more credential failure in a single atomic statement.

        The row stays locked until the caller's transaction ends, so
        concurrent failures are counted one by one.

        Returns:
            The stored counter after the increment
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by username.

        Args:
            username: The username to search for

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by email, compared case-insensitively."""
        ...


@runtime_checkable
class IOrganizationRepository(Protocol):
    """Repository for Organization aggregate persistence."""

    async def add(self, organization: Organization) -> Organization:
        """Insert a new organization.

        Returns:
            The persisted organization with its assigned id

        Raises:
            DuplicateUsernameError: If the handle is taken
        """
        ...

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        """Retrieve an organization with its derived member count."""
        ...

    async def get_by_username(self, username: str) -> Organization | None:
        ...

    async def list_for_user(self, user_id: UserId) -> list[Organization]:
        """List the organizations a user is a member of."""
        ...


@runtime_checkable
class IMembershipRepository(Protocol):
    """Repository for the (user, organization, level) access-control list."""

    async def add(self, membership: Membership) -> None:
        """Insert a membership.

        Raises:
            ConflictError: If the user is already a member
        """
        ...

    async def get(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> Membership | None:
        ...

    async def get_level(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> PermissionLevel:
        """Return the user's level, or ``PermissionLevel.NONE`` without a row."""
        ...

    async def set_level(self, membership: Membership) -> None:
        ...

    async def remove(self, user_id: UserId, organization_id: OrganizationId) -> bool:
        """Delete a membership.

        Returns:
            True if a row was removed, False if there was none
        """
        ...

    async def count_admins(self, organization_id: OrganizationId) -> int:
        """Count admins, holding their rows locked until the transaction ends."""
        ...


@runtime_checkable
class IAPIKeyRepository(Protocol):
    """Repository for APIKey aggregate persistence.

    Simple repository for API key metadata and authentication lookup.
    """

    async def save(self, api_key: APIKey) -> None:
        """Persist an API key aggregate.

        Creates a new API key or updates an existing one.

        Args:
            api_key: The APIKey aggregate to persist
        """
        ...

    async def get_by_id(self, api_key_id: APIKeyId, user_id: UserId) -> APIKey | None:
        """Retrieve an API key by its ID with owner scoping.

        Security note: Requires user_id to prevent cross-user access.

        Args:
            api_key_id: The unique identifier of the API key
            user_id: The user who owns the key

        Returns:
            The APIKey aggregate, or None if not found or not owned by user_id
        """
        ...

    async def list_by_prefix(self, prefix: str) -> list[APIKey]:
        """Every key whose secret starts with ``prefix``.

        Prefixes are not unique, so callers verify the secret against each
        candidate's hash.
        """
        ...

    async def list_for_user(self, user_id: UserId) -> list[APIKey]:
        """List every API key owned by a user, newest first."""
        ...
