"""Dependency injection for the workloads bounded context.

Composes the request session with workload repositories and services. The
caller's context and the permission evaluator come from the shared
infrastructure module, so this context never imports IAM.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workloads.application.mutation_gate import MutationGate
from workloads.application.observability import (
    DefaultMutationGateProbe,
    DefaultWorkloadServiceProbe,
    MutationGateProbe,
    WorkloadServiceProbe,
)
from workloads.application.services import (
    ApplicationService,
    ContainerGroupService,
    EnvironmentService,
)
from workloads.infrastructure.application_repository import (
    ApplicationRepository,
    ComponentRepository,
)
from workloads.infrastructure.container_group_repository import (
    ContainerGroupRepository,
    SecretRepository,
)
from workloads.infrastructure.environment_repository import EnvironmentRepository
from infrastructure.authorization_dependencies import get_authorization_provider
from infrastructure.database.dependencies import get_write_session
from shared_kernel.authorization import AuthorizationProvider

WriteSession = Annotated[AsyncSession, Depends(get_write_session)]


def get_mutation_gate_probe() -> MutationGateProbe:
    return DefaultMutationGateProbe()


def get_workload_service_probe() -> WorkloadServiceProbe:
    return DefaultWorkloadServiceProbe()


def get_mutation_gate(
    authorization: Annotated[
        AuthorizationProvider, Depends(get_authorization_provider)
    ],
    probe: Annotated[MutationGateProbe, Depends(get_mutation_gate_probe)],
) -> MutationGate:
    """Get the MutationGate for this request.

    The authorization provider shares the request session (FastAPI caches
    ``get_write_session`` per request), so permission checks run inside the
    services' transactions.
    """
    return MutationGate(authorization=authorization, probe=probe)


def get_environment_repository(session: WriteSession) -> EnvironmentRepository:
    return EnvironmentRepository(session=session)


def get_application_repository(session: WriteSession) -> ApplicationRepository:
    return ApplicationRepository(session=session)


def get_component_repository(session: WriteSession) -> ComponentRepository:
    return ComponentRepository(session=session)


def get_container_group_repository(
    session: WriteSession,
) -> ContainerGroupRepository:
    return ContainerGroupRepository(session=session)


def get_secret_repository(session: WriteSession) -> SecretRepository:
    return SecretRepository(session=session)


def get_environment_service(
    session: WriteSession,
    environment_repository: Annotated[
        EnvironmentRepository, Depends(get_environment_repository)
    ],
    gate: Annotated[MutationGate, Depends(get_mutation_gate)],
    probe: Annotated[WorkloadServiceProbe, Depends(get_workload_service_probe)],
) -> EnvironmentService:
    return EnvironmentService(
        session=session,
        environment_repository=environment_repository,
        gate=gate,
        probe=probe,
    )


def get_application_service(
    session: WriteSession,
    application_repository: Annotated[
        ApplicationRepository, Depends(get_application_repository)
    ],
    component_repository: Annotated[
        ComponentRepository, Depends(get_component_repository)
    ],
    gate: Annotated[MutationGate, Depends(get_mutation_gate)],
    probe: Annotated[WorkloadServiceProbe, Depends(get_workload_service_probe)],
) -> ApplicationService:
    """Get ApplicationService instance.

    Returns:
        ApplicationService whose repositories and gate share one session
    """
    return ApplicationService(
        session=session,
        application_repository=application_repository,
        component_repository=component_repository,
        gate=gate,
        probe=probe,
    )


def get_container_group_service(
    session: WriteSession,
    application_repository: Annotated[
        ApplicationRepository, Depends(get_application_repository)
    ],
    component_repository: Annotated[
        ComponentRepository, Depends(get_component_repository)
    ],
    environment_repository: Annotated[
        EnvironmentRepository, Depends(get_environment_repository)
    ],
    container_group_repository: Annotated[
        ContainerGroupRepository, Depends(get_container_group_repository)
    ],
    secret_repository: Annotated[SecretRepository, Depends(get_secret_repository)],
    gate: Annotated[MutationGate, Depends(get_mutation_gate)],
    probe: Annotated[WorkloadServiceProbe, Depends(get_workload_service_probe)],
) -> ContainerGroupService:
    return ContainerGroupService(
        session=session,
        application_repository=application_repository,
        component_repository=component_repository,
        environment_repository=environment_repository,
        container_group_repository=container_group_repository,
        secret_repository=secret_repository,
        gate=gate,
        probe=probe,
    )
