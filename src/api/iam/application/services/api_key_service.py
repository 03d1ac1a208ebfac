"""Application service for API keys.

An API key acts with its owner's identity and memberships, so only the owner,
signed in through a full session, may issue, list or revoke it.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)
from iam.application.security import (
    extract_prefix,
    generate_api_key_secret,
    hash_api_key_secret,
)
from iam.domain.aggregates import APIKey
from iam.domain.value_objects import APIKeyId, UserId
from iam.ports.exceptions import APIKeyNotFoundError
from iam.ports.repositories import IAPIKeyRepository
from shared_kernel.auth.context import GrantKind, RequestContext
from shared_kernel.errors import UnauthorizedError, ValidationFailedError

MAX_DESCRIPTION_LENGTH = 255


class APIKeyService:
    """Issues, lists and revokes the caller's own API keys."""

    def __init__(
        self,
        session: AsyncSession,
        api_key_repository: IAPIKeyRepository,
        probe: APIKeyServiceProbe | None = None,
    ):
        self._session = session
        self._api_key_repository = api_key_repository
        self._probe = probe or DefaultAPIKeyServiceProbe()

    async def create_api_key(
        self,
        context: RequestContext,
        description: str,
    ) -> tuple[APIKey, str]:
        """Issue a key to the caller.

        Only the bcrypt hash and the public prefix are stored; the plaintext
        secret is returned here and never again.

        Returns:
            The stored key and its plaintext secret

        Raises:
            UnauthenticatedError: Without a full grant
            UnauthorizedError: If the caller authenticated with an API key
            ValidationFailedError: If the description is blank or too long
        """
        owner_id = self._require_session_owner(context)
        description = description.strip()
        if not 0 < len(description) <= MAX_DESCRIPTION_LENGTH:
            raise ValidationFailedError(
                [("description", f"must be 1-{MAX_DESCRIPTION_LENGTH} characters")]
            )

        secret = generate_api_key_secret()
        api_key = APIKey.create(
            user_id=owner_id,
            description=description,
            key_hash=hash_api_key_secret(secret),
            prefix=extract_prefix(secret),
        )
        try:
            async with self._session.begin():
                await self._api_key_repository.save(api_key)
        except Exception as e:
            self._probe.operation_failed("create", owner_id.value, error=str(e))
            raise

        self._probe.api_key_issued(api_key.id.value, owner_id.value, api_key.prefix)
        return api_key, secret

    async def list_api_keys(self, context: RequestContext) -> list[APIKey]:
        """The caller's keys, revoked ones included."""
        owner_id = self._require_session_owner(context)
        async with self._session.begin():
            keys = await self._api_key_repository.list_for_user(owner_id)

        self._probe.api_keys_listed(
            owner_id.value,
            total=len(keys),
            active=sum(1 for key in keys if key.is_valid()),
        )
        return keys

    async def revoke_api_key(
        self,
        context: RequestContext,
        api_key_id: APIKeyId,
    ) -> APIKey:
        """Revoke one of the caller's keys; it stops resolving immediately.

        Raises:
            APIKeyNotFoundError: If the key is missing or owned by someone else
            APIKeyAlreadyRevokedError: If the key was revoked before
        """
        owner_id = self._require_session_owner(context)
        try:
            async with self._session.begin():
                api_key = await self._api_key_repository.get_by_id(
                    api_key_id, owner_id
                )
                if api_key is None:
                    raise APIKeyNotFoundError(f"API key {api_key_id.value} not found")
                api_key = api_key.revoke()
                await self._api_key_repository.save(api_key)
        except Exception as e:
            self._probe.operation_failed("revoke", owner_id.value, error=str(e))
            raise

        self._probe.api_key_revoked(api_key_id.value, owner_id.value)
        return api_key

    def _require_session_owner(self, context: RequestContext) -> UserId:
        user_id = context.require_full_grant()
        if context.grant_kind != GrantKind.SESSION:
            self._probe.management_refused(user_id, str(context.grant_kind))
            raise UnauthorizedError("API keys can only be managed from a session")
        return UserId(value=user_id)
