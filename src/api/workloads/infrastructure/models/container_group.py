"""SQLAlchemy ORM models for container groups and secrets."""

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class ContainerGroupModel(Base, TimestampMixin):
    """ORM model for container_groups table.

    ``organization_id`` is a copy of the owning application's organization,
    kept so permission checks on a group need no joins.
    """

    __tablename__ = "container_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    component_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    environment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("environments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size: Mapped[str] = mapped_column(String(10), nullable=False)
    container_count: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("size IN ('small', 'medium', 'large', 'xlarge')", name="size"),
        CheckConstraint(
            "container_count BETWEEN 1 AND 10", name="container_count"
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ContainerGroupModel(id={self.id}, component_id={self.component_id})>"
        )


class SecretModel(Base, TimestampMixin):
    """ORM model for secrets table.

    The value is stored exactly as submitted.
    """

    __tablename__ = "secrets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    container_group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("container_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (UniqueConstraint("container_group_id", "key"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<SecretModel(id={self.id}, key={self.key})>"
