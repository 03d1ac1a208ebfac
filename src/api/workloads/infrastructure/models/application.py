"""SQLAlchemy ORM models for applications and components.

Foreign keys cascade on delete as a backstop; repositories also delete
descendants explicitly so the behavior does not depend on the backend
enforcing foreign keys.
"""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class ApplicationModel(Base, TimestampMixin):
    """ORM model for applications table."""

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ApplicationModel(id={self.id}, name={self.name})>"


class ComponentModel(Base, TimestampMixin):
    """ORM model for components table."""

    __tablename__ = "components"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    image: Mapped[str] = mapped_column(String(255), nullable=False)
    deployment_strategy: Mapped[str] = mapped_column(String(10), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "deployment_strategy IN ('rolling', 'recreate')",
            name="deployment_strategy",
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ComponentModel(id={self.id}, name={self.name})>"
