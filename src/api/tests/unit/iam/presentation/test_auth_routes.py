"""Unit tests for signup, sign-in and second-factor routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, create_autospec

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from iam.application.services import GrantResolver, UserService
from iam.application.value_objects import IssuedSession, SignUpResult
from iam.domain.aggregates import Organization, User
from iam.domain.value_objects import OrganizationId, UserId
from iam.ports.exceptions import AccountLockedError, DuplicateUsernameError
from shared_kernel.auth import AuthPhase, SessionTokenCodec, SessionTokenProbe
from shared_kernel.errors import ValidationFailedError


@pytest.fixture
def user() -> User:
    return User(
        id=UserId(value=1), username="alice", email="alice@example.com", name="Alice"
    )


@pytest.fixture
def mock_user_service() -> AsyncMock:
    return AsyncMock(spec=UserService)


@pytest.fixture
def mock_resolver() -> AsyncMock:
    return AsyncMock(spec=GrantResolver)


@pytest.fixture
def codec() -> SessionTokenCodec:
    return SessionTokenCodec(
        secret_key="route-test-secret",
        probe=create_autospec(SessionTokenProbe, instance=True),
    )


@pytest.fixture
def test_client(mock_user_service, mock_resolver, codec) -> TestClient:
    from iam.dependencies.authentication import get_grant_resolver
    from iam.dependencies.session_tokens import get_session_token_codec
    from iam.dependencies.user import get_user_service
    from iam.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_user_service] = lambda: mock_user_service
    app.dependency_overrides[get_grant_resolver] = lambda: mock_resolver
    app.dependency_overrides[get_session_token_codec] = lambda: codec
    app.include_router(router)
    return TestClient(app)


def set_cookies(response) -> str:
    return "\n".join(response.headers.get_list("set-cookie"))


SIGNUP_BODY = {
    "username": "alice",
    "name": "Alice",
    "email": "alice@example.com",
    "password": "correct horse battery",
}


class TestSignUpRoute:
    def test_returns_201_and_sets_both_cookies(
        self, test_client, mock_user_service, user
    ):
        mock_user_service.sign_up.return_value = SignUpResult(
            user=user,
            organization=Organization(
                id=OrganizationId(value=10),
                name="Personal",
                username="alice",
                is_personal=True,
            ),
            session=IssuedSession(token="tok", phase=AuthPhase.FULL, user=user),
        )

        response = test_client.post("/iam/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["organization_id"] == 10
        cookies = set_cookies(response)
        assert "session=tok" in cookies
        assert "HttpOnly" in cookies
        assert "userID=1." in cookies

    def test_validation_failure_lists_fields(self, test_client, mock_user_service):
        mock_user_service.sign_up.side_effect = ValidationFailedError(
            [("username", "too short"), ("email", "invalid")]
        )

        response = test_client.post("/iam/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        detail = response.json()["detail"]
        assert detail["kind"] == "validation_failed"
        assert [v["field"] for v in detail["violations"]] == ["username", "email"]

    def test_duplicate_is_conflict(self, test_client, mock_user_service):
        mock_user_service.sign_up.side_effect = DuplicateUsernameError("taken")

        response = test_client.post("/iam/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unexpected_error_is_opaque(self, test_client, mock_user_service):
        mock_user_service.sign_up.side_effect = RuntimeError("db password leaked")

        response = test_client.post("/iam/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "leaked" not in response.text


class TestSignInRoute:
    def test_pending_session_has_no_display_cookie(
        self, test_client, mock_user_service, user
    ):
        mock_user_service.sign_in.return_value = IssuedSession(
            token="pending", phase=AuthPhase.TOTP_PENDING, user=user
        )

        response = test_client.post(
            "/iam/auth/sign-in", json={"username": "alice", "password": "x"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["requires_second_factor"] is True
        cookies = set_cookies(response)
        assert "session=pending" in cookies
        assert "userID" not in cookies

    def test_locked_account_is_401(self, test_client, mock_user_service):
        mock_user_service.sign_in.side_effect = AccountLockedError("locked")

        response = test_client.post(
            "/iam/auth/sign-in", json={"username": "alice", "password": "x"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "WWW-Authenticate" in response.headers


class TestSecondFactorRoute:
    def test_without_pending_cookie_is_401(self, test_client, mock_resolver):
        response = test_client.post("/iam/auth/totp/verify", json={"code": "123456"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_resolver.complete_second_factor.assert_not_called()

    def test_upgrades_session(self, test_client, mock_resolver, user):
        mock_resolver.complete_second_factor.return_value = IssuedSession(
            token="full", phase=AuthPhase.FULL, user=user
        )
        test_client.cookies.set("session", "pending")

        response = test_client.post("/iam/auth/totp/verify", json={"code": "123456"})

        assert response.status_code == status.HTTP_200_OK
        mock_resolver.complete_second_factor.assert_awaited_once_with(
            "pending", "123456"
        )
        assert "session=full" in set_cookies(response)


class TestSecondFactorEnrollmentRoute:
    def test_malformed_secret_is_422(
        self, test_client, mock_user_service, session_context
    ):
        from iam.dependencies.authentication import get_request_context

        test_client.app.dependency_overrides[get_request_context] = (
            lambda: session_context
        )
        mock_user_service.confirm_second_factor_enrollment.side_effect = (
            ValidationFailedError([("secret", "must be 32 base32 characters")])
        )

        response = test_client.post(
            "/iam/auth/totp/confirm",
            json={"secret": "not-base32!!", "code": "123456"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        detail = response.json()["detail"]
        assert detail["kind"] == "validation_failed"
        assert detail["violations"][0]["field"] == "secret"


class TestSignOutRoute:
    def test_clears_cookies(self, test_client):
        response = test_client.post("/iam/auth/sign-out")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        cookies = set_cookies(response)
        assert 'session=""' in cookies or "session=;" in cookies
