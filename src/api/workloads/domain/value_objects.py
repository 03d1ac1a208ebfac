"""Value objects for the workloads domain.

Typed identifiers for every resource in the hierarchy plus the closed sets a
container group's shape is validated against.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from shared_kernel.identifiers import IntegerId

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
IMAGE_MAX_LENGTH = 255
SECRET_KEY_MAX_LENGTH = 255

# Replica counts a container group may be scaled to
ALLOWED_CONTAINER_COUNTS = frozenset(range(1, 11))


@dataclass(frozen=True)
class EnvironmentId(IntegerId):
    """Identifier for an Environment."""


@dataclass(frozen=True)
class ApplicationId(IntegerId):
    """Identifier for an Application aggregate."""


@dataclass(frozen=True)
class ComponentId(IntegerId):
    """Identifier for a Component."""


@dataclass(frozen=True)
class ContainerGroupId(IntegerId):
    """Identifier for a ContainerGroup."""


@dataclass(frozen=True)
class SecretId(IntegerId):
    """Identifier for a Secret."""


class DeploymentStrategy(StrEnum):
    """How a component's containers are replaced on deploy."""

    ROLLING = "rolling"
    RECREATE = "recreate"


class ContainerSize(StrEnum):
    """Resource class of every container in a group."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XLARGE = "xlarge"
