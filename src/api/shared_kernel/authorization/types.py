"""Authorization type definitions.

Permission levels a caller can hold on an organization. Levels are totally
ordered so a check for "at least write" is a plain comparison.
"""

from enum import IntEnum


class PermissionLevel(IntEnum):
    """Ordered access tier held on an organization.

    ``NONE`` is never stored; it is what an identity without a membership
    resolves to.
    """

    NONE = 0
    READ = 1
    WRITE = 2
    ADMIN = 3

    @property
    def label(self) -> str:
        """Lower-case name used on the wire and in the memberships table."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "PermissionLevel":
        """Parse a stored or submitted label.

        Raises:
            ValueError: If the label is not a known level
        """
        try:
            return cls[label.upper()]
        except KeyError as e:
            raise ValueError(f"Unknown permission level: {label}") from e

    def satisfies(self, required: "PermissionLevel") -> bool:
        """Check whether this level is at least ``required``."""
        return self >= required
