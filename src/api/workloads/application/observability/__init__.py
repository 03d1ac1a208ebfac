"""Domain-Oriented Observability for the workloads application layer."""

from workloads.application.observability.mutation_gate_probe import (
    DefaultMutationGateProbe,
    MutationGateProbe,
)
from workloads.application.observability.workload_service_probe import (
    DefaultWorkloadServiceProbe,
    WorkloadServiceProbe,
)

__all__ = [
    "MutationGateProbe",
    "DefaultMutationGateProbe",
    "WorkloadServiceProbe",
    "DefaultWorkloadServiceProbe",
]
