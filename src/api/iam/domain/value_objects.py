"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ulid import ULID

from shared_kernel.identifiers import IntegerId

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 50
PERSONAL_ORGANIZATION_NAME = "Personal"


@dataclass(frozen=True)
class UserId(IntegerId):
    """Identifier for a User aggregate."""


@dataclass(frozen=True)
class OrganizationId(IntegerId):
    """Identifier for an Organization aggregate."""


@dataclass(frozen=True)
class APIKeyId:
    """Identifier for an APIKey aggregate.

    Uses ULID so the id can be handed out before the key is persisted.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> APIKeyId:
        """Generate a new APIKeyId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> APIKeyId:
        """Create APIKeyId from string value.

        Args:
            value: ULID string

        Returns:
            APIKeyId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid APIKeyId: {value}") from e

        return cls(value=value)


def normalize_email(email: str) -> str:
    """Emails compare case-insensitively, so they are stored lowercased."""
    return email.strip().lower()
