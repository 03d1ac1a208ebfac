"""SQLAlchemy ORM models for organizations and memberships.

Memberships are the access-control list every permission decision reads.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class OrganizationModel(Base, TimestampMixin):
    """ORM model for organizations table.

    ``username`` is the globally unique handle; personal organizations use
    their owner's username.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    username: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    is_personal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<OrganizationModel(id={self.id}, username={self.username})>"


class MembershipModel(Base, TimestampMixin):
    """ORM model for memberships table.

    One row per (user, organization). Deleting either side removes the row.
    """

    __tablename__ = "memberships"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    level: Mapped[str] = mapped_column(String(10), nullable=False)

    __table_args__ = (
        CheckConstraint("level IN ('read', 'write', 'admin')", name="level"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<MembershipModel(user_id={self.user_id}, "
            f"organization_id={self.organization_id}, level={self.level})>"
        )
