"""SQLAlchemy ORM models for the workloads bounded context."""

from workloads.infrastructure.models.application import (
    ApplicationModel,
    ComponentModel,
)
from workloads.infrastructure.models.container_group import (
    ContainerGroupModel,
    SecretModel,
)
from workloads.infrastructure.models.environment import EnvironmentModel

__all__ = [
    "ApplicationModel",
    "ComponentModel",
    "ContainerGroupModel",
    "EnvironmentModel",
    "SecretModel",
]
