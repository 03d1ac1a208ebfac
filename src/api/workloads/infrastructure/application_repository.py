"""SQLAlchemy implementations of IApplicationRepository and
IComponentRepository.

Deletes remove every descendant explicitly, inside the caller's
transaction.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workloads.domain.aggregates import Application, Component
from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    DeploymentStrategy,
)
from workloads.infrastructure.cascade import (
    delete_application_descendants,
    delete_component_descendants,
)
from workloads.infrastructure.models import ApplicationModel, ComponentModel
from workloads.infrastructure.observability import (
    DefaultWorkloadRepositoryProbe,
    WorkloadRepositoryProbe,
)
from workloads.ports.repositories import IApplicationRepository, IComponentRepository
from infrastructure.database import as_utc


class ApplicationRepository(IApplicationRepository):
    """Database-backed repository for Application aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkloadRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultWorkloadRepositoryProbe()

    async def add(self, application: Application) -> Application:
        model = ApplicationModel(
            organization_id=application.organization_id,
            name=application.name,
            description=application.description,
        )
        self._session.add(model)
        await self._session.flush()
        self._probe.record_saved("application", model.id)
        return self._to_aggregate(model)

    async def get_by_id(self, application_id: ApplicationId) -> Application | None:
        model = await self._get_model(application_id.value)
        return self._to_aggregate(model) if model else None

    async def list_for_organization(self, organization_id: int) -> list[Application]:
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.organization_id == organization_id)
            .order_by(ApplicationModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_aggregate(model) for model in result.scalars().all()]

    async def update(self, application: Application) -> Application | None:
        assert application.id is not None
        model = await self._get_model(application.id.value)
        if model is None:
            self._probe.record_missing("application", application.id.value)
            return None
        # organization_id is immutable
        model.name = application.name
        model.description = application.description
        await self._session.flush()
        self._probe.record_saved("application", model.id)
        return self._to_aggregate(model)

    async def delete(self, application_id: ApplicationId) -> bool:
        rows = await delete_application_descendants(
            self._session, application_id.value
        )
        result = await self._session.execute(
            delete(ApplicationModel)
            .where(ApplicationModel.id == application_id.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._probe.record_missing("application", application_id.value)
            return False
        self._probe.records_deleted("application", application_id.value, rows)
        return True

    async def _get_model(self, application_id: int) -> ApplicationModel | None:
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.id == application_id)
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    def _to_aggregate(self, model: ApplicationModel) -> Application:
        return Application(
            id=ApplicationId(value=model.id),
            organization_id=model.organization_id,
            name=model.name,
            description=model.description,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )


class ComponentRepository(IComponentRepository):
    """Database-backed repository for components.

    Every lookup matches the application id too, so a component id from
    another application never resolves.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkloadRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultWorkloadRepositoryProbe()

    async def add(self, component: Component) -> Component:
        model = ComponentModel(
            application_id=component.application_id.value,
            name=component.name,
            image=component.image,
            deployment_strategy=component.deployment_strategy.value,
        )
        self._session.add(model)
        await self._session.flush()
        self._probe.record_saved("component", model.id)
        return self._to_aggregate(model)

    async def get(
        self, component_id: ComponentId, application_id: ApplicationId
    ) -> Component | None:
        model = await self._get_model(component_id.value, application_id.value)
        return self._to_aggregate(model) if model else None

    async def list_for_application(
        self, application_id: ApplicationId
    ) -> list[Component]:
        stmt = (
            select(ComponentModel)
            .where(ComponentModel.application_id == application_id.value)
            .order_by(ComponentModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_aggregate(model) for model in result.scalars().all()]

    async def update(self, component: Component) -> Component | None:
        assert component.id is not None
        model = await self._get_model(
            component.id.value, component.application_id.value
        )
        if model is None:
            self._probe.record_missing("component", component.id.value)
            return None
        model.name = component.name
        model.image = component.image
        model.deployment_strategy = component.deployment_strategy.value
        await self._session.flush()
        self._probe.record_saved("component", model.id)
        return self._to_aggregate(model)

    async def delete(
        self, component_id: ComponentId, application_id: ApplicationId
    ) -> bool:
        component_ids = select(ComponentModel.id).where(
            ComponentModel.id == component_id.value,
            ComponentModel.application_id == application_id.value,
        )
        rows = await delete_component_descendants(self._session, component_ids)
        result = await self._session.execute(
            delete(ComponentModel)
            .where(
                ComponentModel.id == component_id.value,
                ComponentModel.application_id == application_id.value,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._probe.record_missing("component", component_id.value)
            return False
        self._probe.records_deleted("component", component_id.value, rows)
        return True

    async def _get_model(
        self, component_id: int, application_id: int
    ) -> ComponentModel | None:
        stmt = (
            select(ComponentModel)
            .where(
                ComponentModel.id == component_id,
                ComponentModel.application_id == application_id,
            )
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    def _to_aggregate(self, model: ComponentModel) -> Component:
        return Component(
            id=ComponentId(value=model.id),
            application_id=ApplicationId(value=model.application_id),
            name=model.name,
            image=model.image,
            deployment_strategy=DeploymentStrategy(model.deployment_strategy),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
