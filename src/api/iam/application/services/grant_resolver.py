"""Grant resolution for IAM bounded context.

Turns a presented credential into the per-request ``RequestContext`` that the
rest of the system trusts. Three credentials are understood: a session token
in a given phase, an API key, and a ``totp_pending`` session plus a one-time
code.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.lockout import record_credential_failure
from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.security import (
    extract_prefix,
    verify_api_key_secret,
    verify_second_factor_code,
)
from iam.application.value_objects import IssuedSession
from iam.domain.value_objects import UserId
from iam.ports.exceptions import AccountLockedError, InvalidSecondFactorCodeError
from iam.ports.repositories import IAPIKeyRepository, IUserRepository
from infrastructure.settings import CredentialSettings, get_credential_settings
from shared_kernel.auth.context import AuthPhase, GrantKind, RequestContext
from shared_kernel.auth.session_tokens import (
    InvalidSessionTokenError,
    SessionTokenCodec,
)
from shared_kernel.errors import (
    SecondFactorInvalidError,
    SecondFactorRequiredError,
    UnauthenticatedError,
)


class GrantResolver:
    """Resolves credentials into a ``RequestContext``.

    Every resolution re-checks that the identity still exists, so deleting a
    user invalidates their outstanding session tokens.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        api_key_repository: IAPIKeyRepository,
        token_codec: SessionTokenCodec,
        settings: CredentialSettings | None = None,
        probe: AuthenticationProbe | None = None,
    ):
        self._session = session
        self._user_repository = user_repository
        self._api_key_repository = api_key_repository
        self._token_codec = token_codec
        self._settings = settings or get_credential_settings()
        self._probe = probe or DefaultAuthenticationProbe()

    async def resolve_session(
        self, token: str, required_phase: AuthPhase | None = AuthPhase.FULL
    ) -> RequestContext:
        """Resolve a session token that must be in ``required_phase``.

        Args:
            token: Encoded session token from the session cookie
            required_phase: Phase the caller's operation needs; None accepts
                any phase and leaves the decision to whoever reads the context

        Returns:
            RequestContext with grant kind ``session``

        Raises:
            SecondFactorRequiredError: If a ``totp_pending`` session is
                presented where another phase is required
            UnauthenticatedError: If the token is invalid or expired, is in a
                different phase, or its identity no longer exists
        """
        try:
            claims = self._token_codec.decode(token)
        except InvalidSessionTokenError as e:
            self._probe.grant_rejected(GrantKind.SESSION, reason="invalid_token")
            raise UnauthenticatedError(str(e)) from e

        if required_phase is not None and claims.phase != required_phase:
            self._probe.grant_rejected(
                GrantKind.SESSION, reason=f"phase:{claims.phase.value}"
            )
            message = (
                f"Session is in phase '{claims.phase.value}', "
                f"'{required_phase.value}' required"
            )
            if claims.phase == AuthPhase.TOTP_PENDING:
                raise SecondFactorRequiredError(message)
            raise UnauthenticatedError(message)

        async with self._session.begin():
            user = await self._user_repository.get_by_id(UserId(value=claims.user_id))
        if user is None:
            self._probe.grant_rejected(GrantKind.SESSION, reason="identity_missing")
            raise UnauthenticatedError("Identity no longer exists")

        self._probe.grant_resolved(GrantKind.SESSION, claims.user_id, claims.phase)
        return RequestContext(
            user_id=claims.user_id,
            grant_kind=GrantKind.SESSION,
            phase=claims.phase,
        )

    async def resolve_api_key(self, secret: str) -> RequestContext:
        """Resolve an API key secret.

        Records usage on success.

        Returns:
            RequestContext with grant kind ``api_key`` and phase ``full``

        Raises:
            UnauthenticatedError: If the key is unknown or revoked, or its
                owner no longer exists
        """
        async with self._session.begin():
            candidates = await self._api_key_repository.list_by_prefix(
                extract_prefix(secret)
            )
            api_key = next(
                (
                    key
                    for key in candidates
                    if verify_api_key_secret(secret, key.key_hash)
                ),
                None,
            )
            if api_key is None:
                reason = "not_found"
            elif not api_key.is_valid():
                reason = "revoked"
            elif await self._user_repository.get_by_id(api_key.user_id) is None:
                reason = "owner_missing"
            else:
                reason = None
                await self._api_key_repository.save(api_key.record_usage())

        if reason is not None or api_key is None:
            self._probe.grant_rejected(
                GrantKind.API_KEY, reason=reason or "not_found"
            )
            raise UnauthenticatedError("Invalid API key")

        self._probe.grant_resolved(
            GrantKind.API_KEY, api_key.user_id.value, AuthPhase.FULL
        )
        return RequestContext(
            user_id=api_key.user_id.value,
            grant_kind=GrantKind.API_KEY,
            phase=AuthPhase.FULL,
        )

    async def complete_second_factor(self, token: str, code: str) -> IssuedSession:
        """Upgrade a ``totp_pending`` session with a one-time code.

        On failure the pending session stays as it was, so the client may
        retry with another code until the lockout engages or the pending
        token expires.

        Args:
            token: The pending session token
            code: Six-digit code from the authenticator app

        Returns:
            IssuedSession carrying a new ``full`` token

        Raises:
            UnauthenticatedError: If the token is not a live pending session
            AccountLockedError: While the identity is locked out
            SecondFactorInvalidError: If no secret is enrolled or the code is
                wrong
        """
        context = await self.resolve_session(token, AuthPhase.TOTP_PENDING)
        assert context.user_id is not None
        user_id = UserId(value=context.user_id)
        now = datetime.now(UTC)
        failure: str | None = None

        async with self._session.begin():
            user = await self._user_repository.get_by_id(user_id)
            if user is None or user.totp_secret is None:
                failure = "not_enrolled"
            elif user.is_locked(now):
                failure = "locked"
            elif not verify_second_factor_code(
                user.totp_secret, code, valid_window=self._settings.totp_valid_window
            ):
                failure = "bad_code"
                user = await record_credential_failure(
                    self._user_repository, user, self._settings, now
                )
            elif user.failed_login_attempts:
                user = await self._user_repository.update(user.clear_failed_attempts())

        if failure is not None:
            self._probe.second_factor_failed(user_id=user_id.value, reason=failure)
            if failure == "not_enrolled":
                raise SecondFactorInvalidError(
                    "Two-factor authentication is not enabled"
                )
            if user is not None and user.is_locked(now):
                raise AccountLockedError("Too many failed attempts; try again later")
            raise InvalidSecondFactorCodeError("Invalid verification code")

        assert user is not None
        full_token = self._token_codec.issue(user_id.value, AuthPhase.FULL)
        self._probe.second_factor_completed(user_id=user_id.value)
        return IssuedSession(token=full_token, phase=AuthPhase.FULL, user=user)
