"""SQLAlchemy ORM model for the api_keys table.

Stores API key metadata. The key_hash is the only sensitive data stored -
the plaintext secret is never persisted.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class APIKeyModel(Base, TimestampMixin):
    """ORM model for api_keys table.

    Notes:
    - id is VARCHAR(26) for ULID format
    - key_hash is unique for authentication lookup
    - prefix allows key identification without exposing the full key
    - keys are removed together with their owner
    """

    __tablename__ = "api_keys"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    key_hash: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    prefix: Mapped[str] = mapped_column(String(12), nullable=False, index=True)
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<APIKeyModel(id={self.id}, user_id={self.user_id}, "
            f"prefix={self.prefix})>"
        )
