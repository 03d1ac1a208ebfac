"""Application-layer value objects for IAM bounded context.

These are value objects specific to the application layer: results handed
back to the presentation layer that combine a domain record with a freshly
issued credential.
"""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.aggregates import Organization, User
from shared_kernel.auth.context import AuthPhase


@dataclass(frozen=True)
class IssuedSession:
    """A signed session token and the phase it was issued for."""

    token: str
    phase: AuthPhase
    user: User

    @property
    def requires_second_factor(self) -> bool:
        return self.phase == AuthPhase.TOTP_PENDING


@dataclass(frozen=True)
class SignUpResult:
    """Everything created by a successful signup."""

    user: User
    organization: Organization
    session: IssuedSession


@dataclass(frozen=True)
class SecondFactorEnrollment:
    """A candidate TOTP secret shown once to the user.

    Nothing is persisted until the user proves they can produce a code from
    it.
    """

    secret: str
    provisioning_uri: str
