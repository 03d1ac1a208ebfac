"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

from iam.domain.value_objects import UserId, normalize_email


@dataclass(frozen=True)
class User:
    """User aggregate representing a person who can sign in.

    Business rules:
    - A user without a password hash cannot authenticate by password
      (external-login or passwordless accounts)
    - A user with a second-factor secret must present a one-time code
      after the password before the session becomes fully trusted
    - Repeated credential failures lock the account for a growing period

    ``id`` is None until the repository has persisted the record.
    """

    id: UserId | None
    username: str
    email: str
    name: str
    password_hash: str | None = None
    totp_secret: str | None = None
    github_id: str | None = None
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def register(
        cls,
        username: str,
        email: str,
        name: str,
        password_hash: str | None,
    ) -> User:
        """Factory for a user that has not been persisted yet."""
        return cls(
            id=None,
            username=username,
            email=normalize_email(email),
            name=name,
            password_hash=password_hash,
        )

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.username})"

    @property
    def has_totp(self) -> bool:
        return self.totp_secret is not None

    @property
    def is_passwordless(self) -> bool:
        return self.password_hash is None

    def is_locked(self, now: datetime | None = None) -> bool:
        """Check whether the lockout window is still open."""
        if self.locked_until is None:
            return False
        return (now or datetime.now(UTC)) < self.locked_until

    def with_failure_count(
        self,
        failures: int,
        max_attempts: int,
        base_seconds: int,
        max_seconds: int,
        now: datetime | None = None,
    ) -> User:
        """Return a copy carrying the stored failure count and its lockout.

        ``failures`` is the counter as it stands after the latest failure was
        recorded. Once it reaches ``max_attempts`` the account is locked for
        ``base_seconds * 2 ** (failures - max_attempts)`` seconds, capped at
        ``max_seconds``.
        """
        locked_until = self.locked_until
        if failures >= max_attempts:
            exponent = min(failures - max_attempts, 32)
            seconds = min(base_seconds * 2**exponent, max_seconds)
            locked_until = (now or datetime.now(UTC)) + timedelta(seconds=seconds)
        return replace(
            self, failed_login_attempts=failures, locked_until=locked_until
        )

    def clear_failed_attempts(self) -> User:
        return replace(self, failed_login_attempts=0, locked_until=None)

    def with_totp_secret(self, secret: str | None) -> User:
        return replace(self, totp_secret=secret)
