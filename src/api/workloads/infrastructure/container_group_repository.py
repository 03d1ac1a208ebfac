"""SQLAlchemy implementations of IContainerGroupRepository and
ISecretRepository.

Secret edits and deletes are single statements whose WHERE clause names both
the secret and its container group. The affected row count decides the
outcome, so of two racing deletes only one can succeed.
"""

from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workloads.domain.aggregates import ContainerGroup, Secret
from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    ContainerGroupId,
    ContainerSize,
    EnvironmentId,
    SecretId,
)
from workloads.infrastructure.cascade import delete_container_group_rows
from workloads.infrastructure.models import (
    ComponentModel,
    ContainerGroupModel,
    SecretModel,
)
from workloads.infrastructure.observability import (
    DefaultWorkloadRepositoryProbe,
    WorkloadRepositoryProbe,
)
from workloads.ports.exceptions import DuplicateSecretKeyError
from workloads.ports.repositories import (
    IContainerGroupRepository,
    ISecretRepository,
)
from infrastructure.database import as_utc


class ContainerGroupRepository(IContainerGroupRepository):
    """Database-backed repository for container groups."""

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkloadRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultWorkloadRepositoryProbe()

    async def add(self, container_group: ContainerGroup) -> ContainerGroup:
        model = ContainerGroupModel(
            component_id=container_group.component_id.value,
            environment_id=container_group.environment_id.value,
            organization_id=container_group.organization_id,
            size=container_group.size.value,
            container_count=container_group.container_count,
        )
        self._session.add(model)
        await self._session.flush()
        self._probe.record_saved("container_group", model.id)
        return self._to_aggregate(model)

    async def get_by_id(
        self, container_group_id: ContainerGroupId
    ) -> ContainerGroup | None:
        stmt = select(ContainerGroupModel).where(
            ContainerGroupModel.id == container_group_id.value
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_aggregate(model) if model else None

    async def list_for_application(
        self, application_id: ApplicationId
    ) -> list[ContainerGroup]:
        stmt = (
            select(ContainerGroupModel)
            .join(ComponentModel, ComponentModel.id == ContainerGroupModel.component_id)
            .where(ComponentModel.application_id == application_id.value)
            .order_by(ContainerGroupModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_aggregate(model) for model in result.scalars().all()]

    async def delete(self, container_group_id: ContainerGroupId) -> bool:
        rows = await delete_container_group_rows(
            self._session,
            select(ContainerGroupModel.id).where(
                ContainerGroupModel.id == container_group_id.value
            ),
        )
        if rows == 0:
            self._probe.record_missing("container_group", container_group_id.value)
            return False
        self._probe.records_deleted(
            "container_group", container_group_id.value, rows - 1
        )
        return True

    def _to_aggregate(self, model: ContainerGroupModel) -> ContainerGroup:
        return ContainerGroup(
            id=ContainerGroupId(value=model.id),
            component_id=ComponentId(value=model.component_id),
            environment_id=EnvironmentId(value=model.environment_id),
            organization_id=model.organization_id,
            size=ContainerSize(model.size),
            container_count=model.container_count,
            created_at=as_utc(model.created_at),
        )


class SecretRepository(ISecretRepository):
    """Database-backed repository for secrets."""

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkloadRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultWorkloadRepositoryProbe()

    async def add(self, secret: Secret) -> Secret:
        model = SecretModel(
            container_group_id=secret.container_group_id.value,
            key=secret.key,
            value=secret.value,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._probe.duplicate_rejected("secret", secret.key)
            raise DuplicateSecretKeyError(secret.key) from e

        self._probe.record_saved("secret", model.id)
        return self._to_aggregate(model)

    async def get(
        self, secret_id: SecretId, container_group_id: ContainerGroupId
    ) -> Secret | None:
        stmt = (
            select(SecretModel)
            .where(
                SecretModel.id == secret_id.value,
                SecretModel.container_group_id == container_group_id.value,
            )
            .execution_options(populate_existing=True)
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_aggregate(model) if model else None

    async def key_exists(self, container_group_id: ContainerGroupId, key: str) -> bool:
        stmt = select(SecretModel.id).where(
            SecretModel.container_group_id == container_group_id.value,
            SecretModel.key == key,
        )
        return (await self._session.execute(stmt)).first() is not None

    async def list_for_container_group(
        self, container_group_id: ContainerGroupId
    ) -> list[Secret]:
        stmt = (
            select(SecretModel)
            .where(SecretModel.container_group_id == container_group_id.value)
            .order_by(SecretModel.id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_aggregate(model) for model in result.scalars().all()]

    async def update(
        self,
        secret_id: SecretId,
        container_group_id: ContainerGroupId,
        key: str | None,
        value: str | None,
    ) -> Secret | None:
        changes = {
            name: new
            for name, new in (("key", key), ("value", value))
            if new is not None
        }
        if changes:
            stmt = (
                update(SecretModel)
                .where(
                    SecretModel.id == secret_id.value,
                    SecretModel.container_group_id == container_group_id.value,
                )
                .values(**changes)
                .execution_options(synchronize_session=False)
            )
            try:
                result = await self._session.execute(stmt)
            except IntegrityError as e:
                self._probe.duplicate_rejected("secret", str(key))
                raise DuplicateSecretKeyError(str(key)) from e
            if result.rowcount == 0:
                self._probe.record_missing("secret", secret_id.value)
                return None

        secret = await self.get(secret_id, container_group_id)
        if secret is not None:
            self._probe.record_saved("secret", secret_id.value)
        return secret

    async def delete(
        self, secret_id: SecretId, container_group_id: ContainerGroupId
    ) -> bool:
        result = await self._session.execute(
            delete(SecretModel)
            .where(
                SecretModel.id == secret_id.value,
                SecretModel.container_group_id == container_group_id.value,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._probe.record_missing("secret", secret_id.value)
            return False
        self._probe.records_deleted("secret", secret_id.value, 0)
        return True

    def _to_aggregate(self, model: SecretModel) -> Secret:
        return Secret(
            id=SecretId(value=model.id),
            container_group_id=ContainerGroupId(value=model.container_group_id),
            key=model.key,
            value=model.value,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
