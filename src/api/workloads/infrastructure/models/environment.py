"""SQLAlchemy ORM model for environments."""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class EnvironmentModel(Base, TimestampMixin):
    """ORM model for environments table.

    Names are unique within an organization.
    """

    __tablename__ = "environments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (UniqueConstraint("organization_id", "name"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<EnvironmentModel(id={self.id}, name={self.name})>"
