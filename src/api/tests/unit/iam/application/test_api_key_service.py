"""Unit tests for APIKeyService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, create_autospec

import pytest

from iam.application.observability import APIKeyServiceProbe
from iam.application.services.api_key_service import APIKeyService
from iam.domain.aggregates import APIKey
from iam.domain.value_objects import APIKeyId, UserId
from iam.ports.exceptions import APIKeyAlreadyRevokedError, APIKeyNotFoundError
from shared_kernel.errors import (
    UnauthenticatedError,
    UnauthorizedError,
    ValidationFailedError,
)


@pytest.fixture
def mock_probe():
    return create_autospec(APIKeyServiceProbe, instance=True)


@pytest.fixture
def api_key_service(mock_session, mock_api_key_repository, mock_probe):
    return APIKeyService(
        session=mock_session,
        api_key_repository=mock_api_key_repository,
        probe=mock_probe,
    )


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    from infrastructure.settings import CredentialSettings

    monkeypatch.setattr(
        "iam.application.security.get_credential_settings",
        lambda: CredentialSettings(bcrypt_rounds=4),
    )


def make_key(**overrides) -> APIKey:
    fields = dict(
        id=APIKeyId.generate(),
        user_id=UserId(value=1),
        description="ci",
        key_hash="$2b$04$hash",
        prefix="dock_abcdefg",
        created_at=datetime.now(UTC),
    )
    fields.update(overrides)
    return APIKey(**fields)


class TestCreateAPIKey:
    async def test_returns_plaintext_once_and_stores_hash(
        self, api_key_service, mock_api_key_repository, session_context, mock_probe
    ):
        api_key, secret = await api_key_service.create_api_key(
            session_context, description=" deploy bot "
        )

        assert secret.startswith("dock_")
        assert api_key.key_hash != secret
        assert api_key.prefix == secret[:12]
        assert api_key.description == "deploy bot"
        assert api_key.user_id == UserId(value=1)
        mock_api_key_repository.save.assert_awaited_once_with(api_key)
        mock_probe.api_key_issued.assert_called_once_with(
            api_key.id.value, 1, api_key.prefix
        )

    async def test_api_key_grant_cannot_mint_keys(
        self, api_key_service, api_key_context, mock_api_key_repository, mock_probe
    ):
        with pytest.raises(UnauthorizedError):
            await api_key_service.create_api_key(api_key_context, "ci")
        mock_api_key_repository.save.assert_not_called()
        mock_probe.management_refused.assert_called_once_with(1, "api_key")

    async def test_pending_session_cannot_mint_keys(
        self, api_key_service, pending_context
    ):
        with pytest.raises(UnauthenticatedError):
            await api_key_service.create_api_key(pending_context, "ci")

    @pytest.mark.parametrize("description", ["", "   ", "x" * 256])
    async def test_rejects_bad_description(
        self, api_key_service, session_context, description
    ):
        with pytest.raises(ValidationFailedError):
            await api_key_service.create_api_key(session_context, description)


class TestListAPIKeys:
    async def test_lists_own_keys(
        self, api_key_service, mock_api_key_repository, session_context, mock_probe
    ):
        keys = [make_key(), make_key(is_revoked=True)]
        mock_api_key_repository.list_for_user = AsyncMock(return_value=keys)

        assert await api_key_service.list_api_keys(session_context) == keys
        mock_api_key_repository.list_for_user.assert_awaited_once_with(
            UserId(value=1)
        )
        mock_probe.api_keys_listed.assert_called_once_with(1, total=2, active=1)


class TestRevokeAPIKey:
    async def test_revokes_owned_key(
        self, api_key_service, mock_api_key_repository, session_context
    ):
        key = make_key()
        mock_api_key_repository.get_by_id = AsyncMock(return_value=key)

        revoked = await api_key_service.revoke_api_key(session_context, key.id)

        assert revoked.is_revoked
        mock_api_key_repository.save.assert_awaited_once_with(revoked)

    async def test_missing_key(
        self, api_key_service, mock_api_key_repository, session_context
    ):
        mock_api_key_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(APIKeyNotFoundError):
            await api_key_service.revoke_api_key(session_context, APIKeyId.generate())

    async def test_already_revoked(
        self, api_key_service, mock_api_key_repository, session_context, mock_probe
    ):
        key = make_key(is_revoked=True)
        mock_api_key_repository.get_by_id = AsyncMock(return_value=key)

        with pytest.raises(APIKeyAlreadyRevokedError):
            await api_key_service.revoke_api_key(session_context, key.id)
        mock_probe.operation_failed.assert_called_once()
        assert mock_probe.operation_failed.call_args.args[:2] == ("revoke", 1)
