"""Database infrastructure - shared connection primitives."""

from infrastructure.database.models import Base, TimestampMixin, as_utc

__all__ = [
    "Base",
    "TimestampMixin",
    "as_utc",
]
