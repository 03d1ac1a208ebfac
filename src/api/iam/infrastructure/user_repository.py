"""SQLAlchemy implementation of IUserRepository.

Repositories never open transactions: they run inside the unit of work the
calling application service has begun.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, normalize_email
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.exceptions import DuplicateEmailError, DuplicateUsernameError
from iam.ports.repositories import IUserRepository
from infrastructure.database import as_utc


class UserRepository(IUserRepository):
    """Database-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def add(self, user: User) -> User:
        """Insert a new user and return it with its assigned id.

        The unique constraints are the final word when two signups race past
        the service's pre-checks.

        Raises:
            DuplicateUsernameError: If the username is taken
            DuplicateEmailError: If the email is taken
        """
        model = UserModel(
            username=user.username,
            email=normalize_email(user.email),
            name=user.name,
            github_id=user.github_id,
            password_hash=user.password_hash,
            totp_secret=user.totp_secret,
            failed_login_attempts=user.failed_login_attempts,
            locked_until=user.locked_until,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "email" in str(e.orig).lower():
                self._probe.duplicate_user("email")
                raise DuplicateEmailError("Email address is already registered") from e
            self._probe.duplicate_user("username")
            raise DuplicateUsernameError(
                f"Username '{user.username}' is already taken"
            ) from e

        self._probe.user_saved(model.id, model.username)
        return self._to_aggregate(model)

    async def update(self, user: User) -> User:
        """Persist credential and lockout changes of an existing user.

        Raises:
            ValueError: If the user has no id or no longer exists
        """
        if user.id is None:
            raise ValueError("Cannot update a user that was never persisted")
        model = await self._get_model(UserModel.id == user.id.value)
        if model is None:
            raise ValueError(f"User {user.id.value} does not exist")

        model.name = user.name
        model.password_hash = user.password_hash
        model.totp_secret = user.totp_secret
        model.failed_login_attempts = user.failed_login_attempts
        model.locked_until = user.locked_until
        await self._session.flush()

        self._probe.user_saved(model.id, model.username)
        return self._to_aggregate(model)

    async def increment_failed_attempts(self, user_id: UserId) -> int:
        """Add one to the stored failure counter and return the new value.

        Raises:
            ValueError: If the user no longer exists
        """
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id.value)
            .values(failed_login_attempts=UserModel.failed_login_attempts + 1)
            .returning(UserModel.failed_login_attempts)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        failures = result.scalar_one_or_none()
        if failures is None:
            raise ValueError(f"User {user_id.value} does not exist")
        return failures

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        model = await self._get_model(UserModel.id == user_id.value)
        if model is None:
            self._probe.user_not_found(f"id:{user_id.value}")
            return None
        return self._to_aggregate(model)

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by username.

        Args:
            username: The username to search for

        Returns:
            The User aggregate, or None if not found
        """
        model = await self._get_model(UserModel.username == username)
        if model is None:
            self._probe.user_not_found(f"username:{username}")
            return None
        return self._to_aggregate(model)

    async def get_by_email(self, email: str) -> User | None:
        model = await self._get_model(UserModel.email == normalize_email(email))
        if model is None:
            self._probe.user_not_found("email")
            return None
        return self._to_aggregate(model)

    async def _get_model(self, condition) -> UserModel | None:
        result = await self._session.execute(select(UserModel).where(condition))
        return result.scalar_one_or_none()

    def _to_aggregate(self, model: UserModel) -> User:
        """Convert SQLAlchemy model to domain aggregate."""
        return User(
            id=UserId(value=model.id),
            username=model.username,
            email=model.email,
            name=model.name,
            password_hash=model.password_hash,
            totp_secret=model.totp_secret,
            github_id=model.github_id,
            failed_login_attempts=model.failed_login_attempts,
            locked_until=as_utc(model.locked_until),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
