"""Authorization primitives shared across bounded contexts."""

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import PermissionLevel

__all__ = [
    "AuthorizationProvider",
    "PermissionLevel",
]
