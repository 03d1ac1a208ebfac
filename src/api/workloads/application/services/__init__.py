"""Application services for the workloads bounded context."""

from workloads.application.services.application_service import ApplicationService
from workloads.application.services.container_group_service import (
    ContainerGroupService,
)
from workloads.application.services.environment_service import EnvironmentService

__all__ = [
    "ApplicationService",
    "ContainerGroupService",
    "EnvironmentService",
]
