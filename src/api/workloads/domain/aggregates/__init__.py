"""Domain aggregates for the workloads context."""

from workloads.domain.aggregates.application import Application, Component
from workloads.domain.aggregates.container_group import ContainerGroup, Secret
from workloads.domain.aggregates.environment import Environment

__all__ = [
    "Application",
    "Component",
    "ContainerGroup",
    "Environment",
    "Secret",
]
