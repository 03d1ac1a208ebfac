"""Unit tests for API key HTTP routes."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from iam.application.services.api_key_service import APIKeyService
from iam.domain.aggregates import APIKey
from iam.domain.value_objects import APIKeyId, UserId
from iam.ports.exceptions import APIKeyAlreadyRevokedError, APIKeyNotFoundError
from shared_kernel.auth import RequestContext
from shared_kernel.errors import UnauthorizedError


@pytest.fixture
def mock_api_key_service() -> AsyncMock:
    """Mock APIKeyService for testing."""
    return AsyncMock(spec=APIKeyService)


@pytest.fixture
def sample_api_key() -> APIKey:
    return APIKey(
        id=APIKeyId.generate(),
        user_id=UserId(value=1),
        description="deploy bot",
        key_hash="$2b$12$hashedvalue",
        prefix="dock_abc1234",
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def test_client(mock_api_key_service, session_context) -> TestClient:
    """Create TestClient with mocked dependencies."""
    from iam.dependencies.api_key import get_api_key_service
    from iam.dependencies.authentication import get_request_context
    from iam.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_api_key_service] = lambda: mock_api_key_service
    app.dependency_overrides[get_request_context] = lambda: session_context
    app.include_router(router)
    return TestClient(app)


class TestCreateAPIKeyRoute:
    def test_returns_secret_once(
        self, test_client, mock_api_key_service, sample_api_key, session_context
    ):
        mock_api_key_service.create_api_key.return_value = (
            sample_api_key,
            "dock_plaintext",
        )

        response = test_client.post(
            "/iam/api-keys", json={"description": "deploy bot"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["secret"] == "dock_plaintext"
        assert body["id"] == sample_api_key.id.value
        assert "key_hash" not in body
        mock_api_key_service.create_api_key.assert_awaited_once_with(
            session_context, description="deploy bot"
        )

    def test_api_key_grant_is_forbidden(self, test_client, mock_api_key_service):
        mock_api_key_service.create_api_key.side_effect = UnauthorizedError(
            "API keys can only be managed from a session"
        )

        response = test_client.post("/iam/api-keys", json={"description": "x"})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_empty_description_rejected_by_schema(self, test_client):
        response = test_client.post("/iam/api-keys", json={"description": ""})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


class TestListAPIKeysRoute:
    def test_lists_keys_without_hashes(
        self, test_client, mock_api_key_service, sample_api_key
    ):
        mock_api_key_service.list_api_keys.return_value = [sample_api_key]

        response = test_client.get("/iam/api-keys")

        assert response.status_code == status.HTTP_200_OK
        [key] = response.json()
        assert key["prefix"] == "dock_abc1234"
        assert "key_hash" not in key


class TestRevokeAPIKeyRoute:
    def test_revokes(self, test_client, mock_api_key_service, sample_api_key):
        mock_api_key_service.revoke_api_key.return_value = sample_api_key

        response = test_client.delete(f"/iam/api-keys/{sample_api_key.id.value}")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_invalid_id_is_422(self, test_client, mock_api_key_service):
        response = test_client.delete("/iam/api-keys/not-a-ulid")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        mock_api_key_service.revoke_api_key.assert_not_called()

    def test_missing_is_404(self, test_client, mock_api_key_service):
        mock_api_key_service.revoke_api_key.side_effect = APIKeyNotFoundError("gone")

        response = test_client.delete(f"/iam/api-keys/{APIKeyId.generate().value}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_already_revoked_is_409(self, test_client, mock_api_key_service):
        mock_api_key_service.revoke_api_key.side_effect = APIKeyAlreadyRevokedError(
            "revoked"
        )

        response = test_client.delete(f"/iam/api-keys/{APIKeyId.generate().value}")

        assert response.status_code == status.HTTP_409_CONFLICT


def test_anonymous_context_reaches_service(mock_api_key_service):
    """Routes pass the anonymous context through; the service rejects it."""
    from iam.dependencies.api_key import get_api_key_service
    from iam.dependencies.authentication import get_request_context
    from iam.presentation import router
    from shared_kernel.errors import UnauthenticatedError

    app = FastAPI()
    app.dependency_overrides[get_api_key_service] = lambda: mock_api_key_service
    app.dependency_overrides[get_request_context] = RequestContext.anonymous
    app.include_router(router)
    mock_api_key_service.list_api_keys.side_effect = UnauthenticatedError("no")

    response = TestClient(app).get("/iam/api-keys")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
