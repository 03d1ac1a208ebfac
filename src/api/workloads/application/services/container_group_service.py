"""Application service for container groups and their secrets.

A container group's permission check uses the organization cached on the
group itself, so secret operations need a single lookup before the check.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from workloads.application.mutation_gate import MutationGate
from workloads.application.observability import (
    DefaultWorkloadServiceProbe,
    WorkloadServiceProbe,
)
from workloads.domain.aggregates import Application, ContainerGroup, Secret
from workloads.domain.validation import validate_container_group, validate_secret_key
from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    ContainerGroupId,
    EnvironmentId,
    SecretId,
)
from workloads.ports.exceptions import (
    ApplicationNotFoundError,
    ComponentNotFoundError,
    ContainerGroupNotFoundError,
    DuplicateSecretKeyError,
    EnvironmentNotFoundError,
    SecretNotFoundError,
)
from workloads.ports.repositories import (
    IApplicationRepository,
    IComponentRepository,
    IContainerGroupRepository,
    IEnvironmentRepository,
    ISecretRepository,
)
from shared_kernel.auth.context import RequestContext
from shared_kernel.authorization import PermissionLevel


class ContainerGroupService:
    """Application service for deploying components and managing secrets."""

    def __init__(
        self,
        session: AsyncSession,
        application_repository: IApplicationRepository,
        component_repository: IComponentRepository,
        environment_repository: IEnvironmentRepository,
        container_group_repository: IContainerGroupRepository,
        secret_repository: ISecretRepository,
        gate: MutationGate,
        probe: WorkloadServiceProbe | None = None,
    ):
        self._session = session
        self._application_repository = application_repository
        self._component_repository = component_repository
        self._environment_repository = environment_repository
        self._container_group_repository = container_group_repository
        self._secret_repository = secret_repository
        self._gate = gate
        self._probe = probe or DefaultWorkloadServiceProbe()

    async def create_container_group(
        self,
        context: RequestContext,
        application_id: ApplicationId,
        component_id: ComponentId,
        environment_id: EnvironmentId,
        size: str,
        container_count: int,
    ) -> ContainerGroup:
        """Deploy a component of an application into an environment.

        The component must belong to the application and the environment to
        the application's organization; the group caches that organization.

        Raises:
            ValidationFailedError: If size or container count is not allowed
            ApplicationNotFoundError: If the application is not visible
            UnauthorizedError: If the caller holds only read
            ComponentNotFoundError: If the component is not in the application
            EnvironmentNotFoundError: If the environment is in another
                organization or does not exist
        """
        self._gate.authenticate(context)
        parsed_size = validate_container_group(size, container_count)

        try:
            async with self._session.begin():
                application = await self._load_application(
                    context, application_id, PermissionLevel.WRITE
                )
                component = await self._component_repository.get(
                    component_id, application_id
                )
                if component is None:
                    raise ComponentNotFoundError(component_id.value)
                environment = await self._environment_repository.get(
                    environment_id, application.organization_id
                )
                if environment is None:
                    raise EnvironmentNotFoundError(environment_id.value)

                container_group = await self._container_group_repository.add(
                    ContainerGroup.create(
                        component_id=component_id,
                        environment_id=environment_id,
                        organization_id=application.organization_id,
                        size=parsed_size,
                        container_count=container_count,
                    )
                )
        except Exception as e:
            self._probe.mutation_failed("create_container_group", error=str(e))
            raise

        assert container_group.id is not None
        self._probe.resource_created(
            "container_group",
            container_group.id.value,
            application.organization_id,
        )
        return container_group

    async def list_container_groups(
        self, context: RequestContext, application_id: ApplicationId
    ) -> list[ContainerGroup]:
        """List the container groups of an application's components."""
        self._gate.authenticate(context)
        async with self._session.begin():
            await self._load_application(context, application_id, PermissionLevel.READ)
            return await self._container_group_repository.list_for_application(
                application_id
            )

    async def delete_container_group(
        self, context: RequestContext, container_group_id: ContainerGroupId
    ) -> ContainerGroup:
        """Delete a container group and its secrets; requires write.

        Returns:
            The group as it was before deletion
        """
        self._gate.authenticate(context)
        try:
            async with self._session.begin():
                container_group = await self._load_container_group(
                    context, container_group_id, PermissionLevel.WRITE
                )
                if not await self._container_group_repository.delete(
                    container_group_id
                ):
                    raise ContainerGroupNotFoundError(container_group_id.value)
        except Exception as e:
            self._probe.mutation_failed("delete_container_group", error=str(e))
            raise

        self._probe.resource_deleted("container_group", container_group_id.value)
        return container_group

    async def list_secrets(
        self, context: RequestContext, container_group_id: ContainerGroupId
    ) -> list[Secret]:
        """List a container group's secrets, values included; requires read."""
        self._gate.authenticate(context)
        async with self._session.begin():
            await self._load_container_group(
                context, container_group_id, PermissionLevel.READ
            )
            return await self._secret_repository.list_for_container_group(
                container_group_id
            )

    async def add_secret(
        self,
        context: RequestContext,
        container_group_id: ContainerGroupId,
        key: str,
        value: str,
    ) -> Secret:
        """Add a secret to a container group; requires write.

        Raises:
            ValidationFailedError: If the key is invalid
            ContainerGroupNotFoundError: If the group is not visible
            UnauthorizedError: If the caller holds only read
            DuplicateSecretKeyError: If the group already has this key
        """
        self._gate.authenticate(context)
        validate_secret_key(key)

        try:
            async with self._session.begin():
                container_group = await self._load_container_group(
                    context, container_group_id, PermissionLevel.WRITE
                )
                if await self._secret_repository.key_exists(container_group_id, key):
                    raise DuplicateSecretKeyError(key)
                secret = await self._secret_repository.add(
                    Secret.create(
                        container_group_id=container_group_id, key=key, value=value
                    )
                )
        except Exception as e:
            self._probe.mutation_failed("add_secret", error=str(e))
            raise

        assert secret.id is not None
        self._probe.resource_created(
            "secret", secret.id.value, container_group.organization_id
        )
        return secret

    async def edit_secret(
        self,
        context: RequestContext,
        container_group_id: ContainerGroupId,
        secret_id: SecretId,
        key: str | None = None,
        value: str | None = None,
    ) -> Secret:
        """Change a secret's key and/or value; ``None`` leaves a field as is.

        The secret is addressed by its id and its group id together.

        Raises:
            ContainerGroupNotFoundError: If the group is not visible
            SecretNotFoundError: If the secret is not in this group, or was
                deleted concurrently
            DuplicateSecretKeyError: If the new key is used by another secret
        """
        self._gate.authenticate(context)
        validate_secret_key(key)

        try:
            async with self._session.begin():
                await self._load_container_group(
                    context, container_group_id, PermissionLevel.WRITE
                )
                secret = await self._secret_repository.update(
                    secret_id, container_group_id, key=key, value=value
                )
                if secret is None:
                    raise SecretNotFoundError(secret_id.value)
        except Exception as e:
            self._probe.mutation_failed("edit_secret", error=str(e))
            raise

        self._probe.resource_updated("secret", secret_id.value)
        return secret

    async def delete_secret(
        self,
        context: RequestContext,
        container_group_id: ContainerGroupId,
        secret_id: SecretId,
    ) -> None:
        """Delete a secret addressed by its id and its group id together.

        Raises:
            ContainerGroupNotFoundError: If the group is not visible
            SecretNotFoundError: If the secret is not in this group, or was
                deleted concurrently
        """
        self._gate.authenticate(context)
        try:
            async with self._session.begin():
                await self._load_container_group(
                    context, container_group_id, PermissionLevel.WRITE
                )
                if not await self._secret_repository.delete(
                    secret_id, container_group_id
                ):
                    raise SecretNotFoundError(secret_id.value)
        except Exception as e:
            self._probe.mutation_failed("delete_secret", error=str(e))
            raise

        self._probe.resource_deleted("secret", secret_id.value)

    async def _load_application(
        self,
        context: RequestContext,
        application_id: ApplicationId,
        required: PermissionLevel,
    ) -> Application:
        not_found = ApplicationNotFoundError(application_id.value)
        application = await self._application_repository.get_by_id(application_id)
        if application is None:
            raise not_found
        await self._gate.authorize(
            context, application.organization_id, required, not_found=not_found
        )
        return application

    async def _load_container_group(
        self,
        context: RequestContext,
        container_group_id: ContainerGroupId,
        required: PermissionLevel,
    ) -> ContainerGroup:
        not_found = ContainerGroupNotFoundError(container_group_id.value)
        container_group = await self._container_group_repository.get_by_id(
            container_group_id
        )
        if container_group is None:
            raise not_found
        await self._gate.authorize(
            context, container_group.organization_id, required, not_found=not_found
        )
        return container_group
