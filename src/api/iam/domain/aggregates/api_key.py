"""APIKey aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime

from iam.domain.value_objects import APIKeyId, UserId


@dataclass(frozen=True)
class APIKey:
    """APIKey aggregate representing a programmatic access credential.

    API keys provide an alternative to session cookies for programmatic
    access (CI pipelines, scripts, service integrations).

    Business rules:
    - API keys are tied to the user who created them
    - Keys can be revoked but not unrevoked
    - Usage is tracked via last_used_at
    """

    id: APIKeyId
    user_id: UserId
    description: str
    key_hash: str
    prefix: str
    created_at: datetime
    last_used_at: datetime | None = None
    is_revoked: bool = False

    @classmethod
    def create(
        cls,
        user_id: UserId,
        description: str,
        key_hash: str,
        prefix: str,
    ) -> APIKey:
        """Factory method for creating a new API key.

        Args:
            user_id: The user who owns this key
            description: A descriptive label for the key
            key_hash: The hashed secret (never store plaintext)
            prefix: The key prefix for identification (e.g., dock_abc1234)

        Returns:
            A new, unrevoked APIKey
        """
        return cls(
            id=APIKeyId.generate(),
            user_id=user_id,
            description=description,
            key_hash=key_hash,
            prefix=prefix,
            created_at=datetime.now(UTC),
        )

    def revoke(self) -> APIKey:
        """Return a revoked copy of this API key.

        Raises:
            APIKeyAlreadyRevokedError: If the key is already revoked
        """
        from iam.ports.exceptions import APIKeyAlreadyRevokedError

        if self.is_revoked:
            raise APIKeyAlreadyRevokedError(
                f"API key {self.id.value} is already revoked"
            )

        return replace(self, is_revoked=True)

    def record_usage(self) -> APIKey:
        """Return a copy with last_used_at set to now."""
        return replace(self, last_used_at=datetime.now(UTC))

    def is_valid(self) -> bool:
        return not self.is_revoked
