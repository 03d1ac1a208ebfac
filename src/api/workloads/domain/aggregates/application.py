"""Application aggregate and its Components.

An Application is the aggregate root whose organization gates every
mutation below it. Its organization is fixed at creation, and a component's
application is fixed likewise.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    DeploymentStrategy,
)


@dataclass(frozen=True)
class Application:
    """Application aggregate.

    Business rules:
    - ``organization_id`` never changes after creation
    - Deleting an application deletes its components, their container
      groups and their secrets
    """

    id: ApplicationId | None
    organization_id: int
    name: str
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls, organization_id: int, name: str, description: str = ""
    ) -> Application:
        """Factory method for a new, not yet persisted application."""
        return cls(
            id=None,
            organization_id=organization_id,
            name=name,
            description=description,
        )

    def with_changes(
        self, name: str | None = None, description: str | None = None
    ) -> Application:
        """Apply a partial update.

        ``None`` means "leave unchanged", so a field cannot be cleared to
        None, only to an empty string where that is allowed.
        """
        return replace(
            self,
            name=self.name if name is None else name,
            description=self.description if description is None else description,
        )


@dataclass(frozen=True)
class Component:
    """A deployable unit of an application: one container image."""

    id: ComponentId | None
    application_id: ApplicationId
    name: str
    image: str
    deployment_strategy: DeploymentStrategy = DeploymentStrategy.ROLLING
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        application_id: ApplicationId,
        name: str,
        image: str,
        deployment_strategy: DeploymentStrategy,
    ) -> Component:
        return cls(
            id=None,
            application_id=application_id,
            name=name,
            image=image,
            deployment_strategy=deployment_strategy,
        )

    def with_changes(
        self,
        name: str | None = None,
        image: str | None = None,
        deployment_strategy: DeploymentStrategy | None = None,
    ) -> Component:
        """Apply a partial update; ``None`` fields are left unchanged."""
        return replace(
            self,
            name=self.name if name is None else name,
            image=self.image if image is None else image,
            deployment_strategy=(
                self.deployment_strategy
                if deployment_strategy is None
                else deployment_strategy
            ),
        )
