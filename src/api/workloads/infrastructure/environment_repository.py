"""SQLAlchemy implementation of IEnvironmentRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workloads.domain.aggregates import Environment
from workloads.domain.value_objects import EnvironmentId
from workloads.infrastructure.models import EnvironmentModel
from workloads.infrastructure.observability import (
    DefaultWorkloadRepositoryProbe,
    WorkloadRepositoryProbe,
)
from workloads.ports.exceptions import DuplicateEnvironmentNameError
from workloads.ports.repositories import IEnvironmentRepository
from infrastructure.database import as_utc


class EnvironmentRepository(IEnvironmentRepository):
    """Database-backed repository for environments."""

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkloadRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultWorkloadRepositoryProbe()

    async def add(self, environment: Environment) -> Environment:
        model = EnvironmentModel(
            organization_id=environment.organization_id,
            name=environment.name,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._probe.duplicate_rejected("environment", environment.name)
            raise DuplicateEnvironmentNameError(environment.name) from e

        self._probe.record_saved("environment", model.id)
        return self._to_aggregate(model)

    async def get(
        self, environment_id: EnvironmentId, organization_id: int
    ) -> Environment | None:
        stmt = select(EnvironmentModel).where(
            EnvironmentModel.id == environment_id.value,
            EnvironmentModel.organization_id == organization_id,
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_aggregate(model) if model else None

    async def list_for_organization(self, organization_id: int) -> list[Environment]:
        stmt = (
            select(EnvironmentModel)
            .where(EnvironmentModel.organization_id == organization_id)
            .order_by(EnvironmentModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_aggregate(model) for model in result.scalars().all()]

    def _to_aggregate(self, model: EnvironmentModel) -> Environment:
        return Environment(
            id=EnvironmentId(value=model.id),
            organization_id=model.organization_id,
            name=model.name,
            created_at=as_utc(model.created_at),
        )
