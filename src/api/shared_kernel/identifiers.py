"""Base class for database-assigned integer identifiers.

Each bounded context declares its own subclasses so that an application id
can never be passed where a component id is expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self


@dataclass(frozen=True)
class IntegerId:
    """Typed wrapper around a positive integer primary key."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{type(self).__name__} requires an int")
        if self.value < 1:
            raise ValueError(f"Invalid {type(self).__name__}: {self.value}")

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create an id from its decimal string form.

        Args:
            value: Decimal string, e.g. from a path segment or token claim

        Returns:
            Typed id instance

        Raises:
            ValueError: If value is not a positive integer
        """
        try:
            parsed = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid {cls.__name__}: {value}") from e
        return cls(value=parsed)
