"""Repository protocols (ports) for the workloads bounded context.

Implementations share the caller's database session, so every call joins
the transaction the application service has opened. Lookups of child
resources are always scoped by their parent id as well.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from workloads.domain.aggregates import (
    Application,
    Component,
    ContainerGroup,
    Environment,
    Secret,
)
from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    ContainerGroupId,
    EnvironmentId,
    SecretId,
)


@runtime_checkable
class IEnvironmentRepository(Protocol):
    """Repository for environments."""

    async def add(self, environment: Environment) -> Environment:
        """Insert an environment and return it with its id.

        Raises:
            DuplicateEnvironmentNameError: If the organization already has
                an environment with this name
        """
        ...

    async def get(
        self, environment_id: EnvironmentId, organization_id: int
    ) -> Environment | None:
        """Retrieve an environment only if it belongs to the organization."""
        ...

    async def list_for_organization(self, organization_id: int) -> list[Environment]:
        ...


@runtime_checkable
class IApplicationRepository(Protocol):
    """Repository for Application aggregates."""

    async def add(self, application: Application) -> Application:
        ...

    async def get_by_id(self, application_id: ApplicationId) -> Application | None:
        ...

    async def list_for_organization(self, organization_id: int) -> list[Application]:
        ...

    async def update(self, application: Application) -> Application | None:
        """Persist name and description.

        Returns:
            The stored application, or None if the row is gone
        """
        ...

    async def delete(self, application_id: ApplicationId) -> bool:
        """Delete an application with every component, container group and
        secret under it.

        Returns:
            False if the application row was already gone
        """
        ...


@runtime_checkable
class IComponentRepository(Protocol):
    """Repository for components, always addressed through their application."""

    async def add(self, component: Component) -> Component:
        ...

    async def get(
        self, component_id: ComponentId, application_id: ApplicationId
    ) -> Component | None:
        ...

    async def list_for_application(
        self, application_id: ApplicationId
    ) -> list[Component]:
        ...

    async def update(self, component: Component) -> Component | None:
        ...

    async def delete(
        self, component_id: ComponentId, application_id: ApplicationId
    ) -> bool:
        """Delete a component with its container groups and their secrets."""
        ...


@runtime_checkable
class IContainerGroupRepository(Protocol):
    """Repository for container groups."""

    async def add(self, container_group: ContainerGroup) -> ContainerGroup:
        ...

    async def get_by_id(
        self, container_group_id: ContainerGroupId
    ) -> ContainerGroup | None:
        ...

    async def list_for_application(
        self, application_id: ApplicationId
    ) -> list[ContainerGroup]:
        ...

    async def delete(self, container_group_id: ContainerGroupId) -> bool:
        """Delete a container group and its secrets."""
        ...


@runtime_checkable
class ISecretRepository(Protocol):
    """Repository for secrets.

    Edits and deletes are single statements matching both the secret id and
    the container group id, so a secret can never be reached through a
    group it does not belong to.
    """

    async def add(self, secret: Secret) -> Secret:
        """Insert a secret.

        Raises:
            DuplicateSecretKeyError: If the key is already used in the group
        """
        ...

    async def get(
        self, secret_id: SecretId, container_group_id: ContainerGroupId
    ) -> Secret | None:
        ...

    async def key_exists(self, container_group_id: ContainerGroupId, key: str) -> bool:
        ...

    async def list_for_container_group(
        self, container_group_id: ContainerGroupId
    ) -> list[Secret]:
        ...

    async def update(
        self,
        secret_id: SecretId,
        container_group_id: ContainerGroupId,
        key: str | None,
        value: str | None,
    ) -> Secret | None:
        """Change key and/or value of a secret in one statement.

        Returns:
            The updated secret, or None if no row matched

        Raises:
            DuplicateSecretKeyError: If the new key is already used
        """
        ...

    async def delete(
        self, secret_id: SecretId, container_group_id: ContainerGroupId
    ) -> bool:
        """Delete a secret in one statement.

        Returns:
            False if no row matched
        """
        ...
