"""SQLAlchemy implementation of IAPIKeyRepository.

Rows hold the bcrypt hash and public prefix of a secret, never the secret.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import APIKey
from iam.domain.value_objects import APIKeyId, UserId
from iam.infrastructure.models import APIKeyModel
from iam.infrastructure.observability import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
)
from iam.ports.repositories import IAPIKeyRepository
from infrastructure.database import as_utc


class APIKeyRepository(IAPIKeyRepository):
    """Database-backed repository for API keys."""

    def __init__(
        self,
        session: AsyncSession,
        probe: APIKeyRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultAPIKeyRepositoryProbe()

    async def save(self, api_key: APIKey) -> None:
        """Insert a new key, or write back its usage and revocation state.

        Description, hash and prefix never change once stored.
        """
        model = await self._session.get(APIKeyModel, api_key.id.value)
        if model is None:
            self._session.add(
                APIKeyModel(
                    id=api_key.id.value,
                    user_id=api_key.user_id.value,
                    description=api_key.description,
                    key_hash=api_key.key_hash,
                    prefix=api_key.prefix,
                    created_at=api_key.created_at,
                    last_used_at=api_key.last_used_at,
                    is_revoked=api_key.is_revoked,
                )
            )
        else:
            model.last_used_at = api_key.last_used_at
            model.is_revoked = api_key.is_revoked

        await self._session.flush()
        self._probe.api_key_stored(
            api_key.id.value, api_key.user_id.value, api_key.is_revoked
        )

    async def get_by_id(self, api_key_id: APIKeyId, user_id: UserId) -> APIKey | None:
        """Load a key only if ``user_id`` owns it."""
        stmt = select(APIKeyModel).where(
            APIKeyModel.id == api_key_id.value,
            APIKeyModel.user_id == user_id.value,
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        if model is None:
            self._probe.api_key_missing(api_key_id.value, user_id.value)
            return None
        return self._to_aggregate(model)

    async def list_by_prefix(self, prefix: str) -> list[APIKey]:
        stmt = select(APIKeyModel).where(APIKeyModel.prefix == prefix)
        models = (await self._session.execute(stmt)).scalars().all()
        if len(models) > 1:
            self._probe.prefix_shared(len(models))
        return [self._to_aggregate(model) for model in models]

    async def list_for_user(self, user_id: UserId) -> list[APIKey]:
        stmt = (
            select(APIKeyModel)
            .where(APIKeyModel.user_id == user_id.value)
            .order_by(APIKeyModel.created_at.desc(), APIKeyModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_aggregate(model) for model in result.scalars().all()]

    @staticmethod
    def _to_aggregate(model: APIKeyModel) -> APIKey:
        return APIKey(
            id=APIKeyId(value=model.id),
            user_id=UserId(value=model.user_id),
            description=model.description,
            key_hash=model.key_hash,
            prefix=model.prefix,
            created_at=as_utc(model.created_at),
            last_used_at=as_utc(model.last_used_at),
            is_revoked=model.is_revoked,
        )
