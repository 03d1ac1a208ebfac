"""Per-request authentication context.

The context is created once per request by the grant resolver and passed
explicitly down the call chain. Nothing about the caller is kept in
process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from shared_kernel.errors import SecondFactorRequiredError, UnauthenticatedError


class GrantKind(StrEnum):
    """The class of credential that authenticated a request."""

    NONE = "none"
    SESSION = "session"
    API_KEY = "api_key"


class AuthPhase(StrEnum):
    """Trust stage of an interactive session."""

    FULL = "full"
    TOTP_PENDING = "totp_pending"
    PASSWORD_RESET_PENDING = "password_reset_pending"


@dataclass(frozen=True)
class RequestContext:
    """Who is calling and how they proved it.

    ``user_id`` is the raw numeric identity id; bounded contexts other than
    IAM only ever see identities through this value.
    """

    user_id: int | None
    grant_kind: GrantKind
    phase: AuthPhase

    @classmethod
    def anonymous(cls) -> RequestContext:
        """Context for a request that presented no usable credential."""
        return cls(user_id=None, grant_kind=GrantKind.NONE, phase=AuthPhase.FULL)

    @property
    def is_authenticated(self) -> bool:
        return self.grant_kind != GrantKind.NONE and self.user_id is not None

    def require_full_grant(self) -> int:
        """Return the identity id if this context may mutate resources.

        Raises:
            SecondFactorRequiredError: If the session still awaits its
                one-time code
            UnauthenticatedError: If there is no grant, or the session has not
                completed every sign-in phase
        """
        if not self.is_authenticated or self.user_id is None:
            raise UnauthenticatedError("Not authenticated")
        if self.phase == AuthPhase.TOTP_PENDING:
            raise SecondFactorRequiredError(
                f"Session is in phase '{self.phase.value}', "
                "complete the second factor first"
            )
        if self.phase != AuthPhase.FULL:
            raise UnauthenticatedError(
                f"Session is in phase '{self.phase.value}', full sign-in required"
            )
        return self.user_id
