"""Application service for Applications and their Components.

Every method is one unit of work following the same sequence: check the
grant, validate input, then inside one transaction load the target, check
the caller's level on the organization it belongs to, mutate and persist.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from workloads.application.mutation_gate import MutationGate
from workloads.application.observability import (
    DefaultWorkloadServiceProbe,
    WorkloadServiceProbe,
)
from workloads.domain.aggregates import Application, Component
from workloads.domain.validation import validate_application, validate_component
from workloads.domain.value_objects import ApplicationId, ComponentId
from workloads.ports.exceptions import (
    ApplicationNotFoundError,
    ComponentNotFoundError,
    OrganizationNotVisibleError,
)
from workloads.ports.repositories import IApplicationRepository, IComponentRepository
from shared_kernel.auth.context import RequestContext
from shared_kernel.authorization import PermissionLevel


class ApplicationService:
    """Application service for the top of the resource hierarchy."""

    def __init__(
        self,
        session: AsyncSession,
        application_repository: IApplicationRepository,
        component_repository: IComponentRepository,
        gate: MutationGate,
        probe: WorkloadServiceProbe | None = None,
    ):
        """Initialize ApplicationService with dependencies.

        Args:
            session: Database session for transaction management
            application_repository: Repository for applications
            component_repository: Repository for components
            gate: Permission checks, sharing ``session``
            probe: Optional domain probe for observability
        """
        self._session = session
        self._application_repository = application_repository
        self._component_repository = component_repository
        self._gate = gate
        self._probe = probe or DefaultWorkloadServiceProbe()

    async def create_application(
        self,
        context: RequestContext,
        organization_id: int,
        name: str,
        description: str = "",
    ) -> Application:
        """Create an application owned by an organization; requires write.

        Raises:
            ValidationFailedError: If name or description is invalid
            OrganizationNotVisibleError: If the caller is not a member
            UnauthorizedError: If the caller holds only read
        """
        self._gate.authenticate(context)
        name = name.strip()
        validate_application(name, description)

        try:
            async with self._session.begin():
                await self._gate.authorize(
                    context,
                    organization_id,
                    PermissionLevel.WRITE,
                    not_found=OrganizationNotVisibleError(organization_id),
                )
                application = await self._application_repository.add(
                    Application.create(
                        organization_id=organization_id,
                        name=name,
                        description=description,
                    )
                )
        except Exception as e:
            self._probe.mutation_failed("create_application", error=str(e))
            raise

        assert application.id is not None
        self._probe.resource_created(
            "application", application.id.value, organization_id
        )
        return application

    async def get_application(
        self, context: RequestContext, application_id: ApplicationId
    ) -> Application:
        """Load one application; requires read on its organization."""
        self._gate.authenticate(context)
        async with self._session.begin():
            return await self._load_application(
                context, application_id, PermissionLevel.READ
            )

    async def list_applications(
        self, context: RequestContext, organization_id: int
    ) -> list[Application]:
        """List an organization's applications; requires read."""
        self._gate.authenticate(context)
        async with self._session.begin():
            await self._gate.authorize(
                context,
                organization_id,
                PermissionLevel.READ,
                not_found=OrganizationNotVisibleError(organization_id),
            )
            return await self._application_repository.list_for_organization(
                organization_id
            )

    async def update_application(
        self,
        context: RequestContext,
        application_id: ApplicationId,
        name: str | None = None,
        description: str | None = None,
    ) -> Application:
        """Change name and/or description; ``None`` leaves a field as is.

        Raises:
            ValidationFailedError: If a given field is invalid
            ApplicationNotFoundError: If missing or not visible to the caller
            UnauthorizedError: If the caller holds only read
        """
        self._gate.authenticate(context)
        if name is not None:
            name = name.strip()
        validate_application(name, description)

        try:
            async with self._session.begin():
                application = await self._load_application(
                    context, application_id, PermissionLevel.WRITE
                )
                updated = await self._application_repository.update(
                    application.with_changes(name=name, description=description)
                )
                if updated is None:
                    raise ApplicationNotFoundError(application_id.value)
        except Exception as e:
            self._probe.mutation_failed("update_application", error=str(e))
            raise

        self._probe.resource_updated("application", application_id.value)
        return updated

    async def delete_application(
        self, context: RequestContext, application_id: ApplicationId
    ) -> Application:
        """Delete an application and everything beneath it.

        Components, their container groups and those groups' secrets are
        removed in the same transaction.

        Returns:
            The application as it was before deletion

        Raises:
            ApplicationNotFoundError: If missing, not visible, or deleted
                concurrently
            UnauthorizedError: If the caller holds only read
        """
        self._gate.authenticate(context)
        try:
            async with self._session.begin():
                application = await self._load_application(
                    context, application_id, PermissionLevel.WRITE
                )
                if not await self._application_repository.delete(application_id):
                    raise ApplicationNotFoundError(application_id.value)
        except Exception as e:
            self._probe.mutation_failed("delete_application", error=str(e))
            raise

        self._probe.resource_deleted("application", application_id.value)
        return application

    async def list_components(
        self, context: RequestContext, application_id: ApplicationId
    ) -> list[Component]:
        """List an application's components; requires read."""
        self._gate.authenticate(context)
        async with self._session.begin():
            await self._load_application(context, application_id, PermissionLevel.READ)
            return await self._component_repository.list_for_application(
                application_id
            )

    async def create_component(
        self,
        context: RequestContext,
        application_id: ApplicationId,
        name: str,
        image: str,
        deployment_strategy: str,
    ) -> Component:
        """Add a component to an application; requires write.

        Raises:
            ValidationFailedError: If name, image or strategy is invalid
            ApplicationNotFoundError: If missing or not visible to the caller
            UnauthorizedError: If the caller holds only read
        """
        self._gate.authenticate(context)
        name = name.strip()
        strategy = validate_component(name, image, deployment_strategy)
        assert strategy is not None

        try:
            async with self._session.begin():
                application = await self._load_application(
                    context, application_id, PermissionLevel.WRITE
                )
                component = await self._component_repository.add(
                    Component.create(
                        application_id=application_id,
                        name=name,
                        image=image,
                        deployment_strategy=strategy,
                    )
                )
        except Exception as e:
            self._probe.mutation_failed("create_component", error=str(e))
            raise

        assert component.id is not None
        self._probe.resource_created(
            "component", component.id.value, application.organization_id
        )
        return component

    async def update_component(
        self,
        context: RequestContext,
        application_id: ApplicationId,
        component_id: ComponentId,
        name: str | None = None,
        image: str | None = None,
        deployment_strategy: str | None = None,
    ) -> Component:
        """Partially update a component of an application; requires write.

        Raises:
            ApplicationNotFoundError: If the application is not visible
            ComponentNotFoundError: If the component is not in the application
        """
        self._gate.authenticate(context)
        if name is not None:
            name = name.strip()
        strategy = validate_component(name, image, deployment_strategy)

        try:
            async with self._session.begin():
                await self._load_application(
                    context, application_id, PermissionLevel.WRITE
                )
                component = await self._component_repository.get(
                    component_id, application_id
                )
                if component is None:
                    raise ComponentNotFoundError(component_id.value)
                updated = await self._component_repository.update(
                    component.with_changes(
                        name=name, image=image, deployment_strategy=strategy
                    )
                )
                if updated is None:
                    raise ComponentNotFoundError(component_id.value)
        except Exception as e:
            self._probe.mutation_failed("update_component", error=str(e))
            raise

        self._probe.resource_updated("component", component_id.value)
        return updated

    async def delete_component(
        self,
        context: RequestContext,
        application_id: ApplicationId,
        component_id: ComponentId,
    ) -> Component:
        """Delete a component with its container groups and their secrets.

        Returns:
            The component as it was before deletion
        """
        self._gate.authenticate(context)
        try:
            async with self._session.begin():
                await self._load_application(
                    context, application_id, PermissionLevel.WRITE
                )
                component = await self._component_repository.get(
                    component_id, application_id
                )
                if component is None or not await self._component_repository.delete(
                    component_id, application_id
                ):
                    raise ComponentNotFoundError(component_id.value)
        except Exception as e:
            self._probe.mutation_failed("delete_component", error=str(e))
            raise

        self._probe.resource_deleted("component", component_id.value)
        return component

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
