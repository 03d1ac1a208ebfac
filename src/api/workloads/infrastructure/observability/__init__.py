"""Domain probes for workloads infrastructure."""

from workloads.infrastructure.observability.repository_probe import (
    DefaultWorkloadRepositoryProbe,
    WorkloadRepositoryProbe,
)

__all__ = [
    "DefaultWorkloadRepositoryProbe",
    "WorkloadRepositoryProbe",
]
