"""Authentication shared kernel module."""

from shared_kernel.auth.context import AuthPhase, GrantKind, RequestContext
from shared_kernel.auth.observability import (
    DefaultSessionTokenProbe,
    SessionTokenProbe,
)
from shared_kernel.auth.session_tokens import (
    InvalidSessionTokenError,
    SessionClaims,
    SessionTokenCodec,
)

__all__ = [
    "AuthPhase",
    "DefaultSessionTokenProbe",
    "GrantKind",
    "InvalidSessionTokenError",
    "RequestContext",
    "SessionClaims",
    "SessionTokenCodec",
    "SessionTokenProbe",
]
