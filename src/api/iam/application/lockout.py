"""Failure counting shared by password sign-in and second-factor completion."""

from __future__ import annotations

from datetime import datetime

from iam.domain.aggregates import User
from iam.ports.repositories import IUserRepository
from infrastructure.settings import CredentialSettings


async def record_credential_failure(
    user_repository: IUserRepository,
    user: User,
    settings: CredentialSettings,
    now: datetime,
) -> User:
    """Count a failed credential against ``user`` and lock it once due.

    The counter is incremented in the database rather than from the loaded
    copy, so parallel guesses each count. Must run inside the caller's
    transaction.
    """
    assert user.id is not None
    failures = await user_repository.increment_failed_attempts(user.id)
    user = user.with_failure_count(
        failures,
        max_attempts=settings.max_failed_attempts,
        base_seconds=settings.lockout_base_seconds,
        max_seconds=settings.lockout_max_seconds,
        now=now,
    )
    if failures >= settings.max_failed_attempts:
        user = await user_repository.update(user)
    return user
