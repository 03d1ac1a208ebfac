"""Signed, self-contained session tokens.

A session token is an HS256 JWT carrying the identity id and the sign-in
phase. Because the token is self-contained there is no server-side session
record: signing out only clears the cookie holding it.

The module also signs the display cookie. That cookie exists so the UI can
show who is signed in; its value is never accepted as a credential.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from shared_kernel.auth.context import AuthPhase

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe


@dataclass(frozen=True)
class SessionClaims:
    """Validated session token claims."""

    user_id: int
    phase: AuthPhase
    issued_at: datetime


class InvalidSessionTokenError(Exception):
    """Raised when a session token cannot be trusted."""

    pass


class SessionTokenCodec:
    """Issues and validates session tokens.

    Full sessions and sessions still waiting on a second factor get
    different lifetimes so an abandoned sign-in expires quickly.
    """

    def __init__(
        self,
        secret_key: str,
        probe: SessionTokenProbe,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        pending_ttl: timedelta = timedelta(minutes=5),
    ):
        """Initialize the codec.

        Args:
            secret_key: HMAC key shared by every API replica.
            probe: Observability probe for logging events.
            algorithm: JWS algorithm (default: HS256).
            ttl: Lifetime of a full session.
            pending_ttl: Lifetime of any non-full session.
        """
        if not secret_key:
            raise ValueError("Session secret key must not be empty")
        self._secret_key = secret_key
        self._probe = probe
        self._algorithm = algorithm
        self._ttl = ttl
        self._pending_ttl = pending_ttl

    def issue(self, user_id: int, phase: AuthPhase) -> str:
        """Issue a session token for an identity in the given phase.

        Args:
            user_id: Numeric identity id.
            phase: Sign-in phase the session is allowed to act in.

        Returns:
            The encoded token.
        """
        now = datetime.now(timezone.utc)
        lifetime = self._ttl if phase == AuthPhase.FULL else self._pending_ttl
        claims = {
            "sub": str(user_id),
            "phase": phase.value,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
        }
        token = jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
        self._probe.token_issued(user_id=str(user_id), phase=phase.value)
        return token

    def decode(self, token: str) -> SessionClaims:
        """Validate a session token and return its claims.

        Args:
            token: The encoded token.

        Returns:
            SessionClaims for the token.

        Raises:
            InvalidSessionTokenError: If the token is malformed, forged,
                expired, or carries unknown claims.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidSessionTokenError("Session has expired") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidSessionTokenError("Invalid session token") from e

        try:
            user_id = int(claims["sub"])
            phase = AuthPhase(claims["phase"])
            issued_at = datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            self._probe.token_validation_failed(reason=f"Bad claims: {e}")
            raise InvalidSessionTokenError("Invalid session token claims") from e

        self._probe.token_validated(user_id=str(user_id), phase=phase.value)
        return SessionClaims(user_id=user_id, phase=phase, issued_at=issued_at)

    def sign_display_value(self, user_id: int) -> str:
        """Return the display cookie value ``"<id>.<signature>"``."""
        return f"{user_id}.{self._display_signature(str(user_id))}"

    def read_display_value(self, value: str) -> int | None:
        """Return the identity id shown by a display cookie, if untampered.

        For display only: authorization never consults this value.
        """
        raw_id, _, signature = value.partition(".")
        if not raw_id.isdigit() or not signature:
            return None
        if not hmac.compare_digest(signature, self._display_signature(raw_id)):
            return None
        return int(raw_id)

    def _display_signature(self, raw_id: str) -> str:
        return hmac.new(
            self._secret_key.encode(),
            f"display:{raw_id}".encode(),
            hashlib.sha256,
        ).hexdigest()
