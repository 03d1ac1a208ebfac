"""Ports (interfaces) for the workloads bounded context."""

from workloads.ports.repositories import (
    IApplicationRepository,
    IComponentRepository,
    IContainerGroupRepository,
    IEnvironmentRepository,
    ISecretRepository,
)

__all__ = [
    "IApplicationRepository",
    "IComponentRepository",
    "IContainerGroupRepository",
    "IEnvironmentRepository",
    "ISecretRepository",
]
