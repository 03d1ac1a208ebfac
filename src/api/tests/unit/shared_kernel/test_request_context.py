"""Unit tests for RequestContext."""

import pytest

from shared_kernel.auth import AuthPhase, GrantKind, RequestContext
from shared_kernel.errors import (
    ErrorKind,
    SecondFactorRequiredError,
    UnauthenticatedError,
)


class TestRequireFullGrant:
    """Tests for RequestContext.require_full_grant."""

    def test_returns_user_id_for_full_session(self, session_context):
        assert session_context.require_full_grant() == 1

    def test_returns_user_id_for_api_key(self, api_key_context):
        assert api_key_context.require_full_grant() == 1

    def test_anonymous_is_rejected(self):
        with pytest.raises(UnauthenticatedError):
            RequestContext.anonymous().require_full_grant()

    @pytest.mark.parametrize(
        "phase", [AuthPhase.TOTP_PENDING, AuthPhase.PASSWORD_RESET_PENDING]
    )
    def test_pending_phases_are_rejected(self, phase):
        context = RequestContext(user_id=7, grant_kind=GrantKind.SESSION, phase=phase)

        with pytest.raises(UnauthenticatedError, match=phase.value):
            context.require_full_grant()

    def test_totp_pending_needs_second_factor(self):
        context = RequestContext(
            user_id=7, grant_kind=GrantKind.SESSION, phase=AuthPhase.TOTP_PENDING
        )

        with pytest.raises(SecondFactorRequiredError, match="totp_pending") as exc:
            context.require_full_grant()
        assert exc.value.kind is ErrorKind.SECOND_FACTOR_REQUIRED
        assert isinstance(exc.value, UnauthenticatedError)

    def test_password_reset_pending_is_plain_unauthenticated(self):
        context = RequestContext(
            user_id=7,
            grant_kind=GrantKind.SESSION,
            phase=AuthPhase.PASSWORD_RESET_PENDING,
        )

        with pytest.raises(UnauthenticatedError) as exc:
            context.require_full_grant()
        assert exc.value.kind is ErrorKind.UNAUTHENTICATED

    def test_anonymous_is_not_authenticated(self):
        assert RequestContext.anonymous().is_authenticated is False
