"""Fixtures shared by workloads unit tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, create_autospec

import pytest

from workloads.application.mutation_gate import MutationGate
from workloads.application.observability import (
    MutationGateProbe,
    WorkloadServiceProbe,
)
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
    ContainerSize,
    DeploymentStrategy,
    EnvironmentId,
    SecretId,
)
from workloads.ports.repositories import (
    IApplicationRepository,
    IComponentRepository,
    IContainerGroupRepository,
    IEnvironmentRepository,
    ISecretRepository,
)
from shared_kernel.authorization import AuthorizationProvider, PermissionLevel

ORG_ID = 10
NOW = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture
def mock_authorization():
    """Permission evaluator; callers hold write unless a test says otherwise."""
    authorization = create_autospec(AuthorizationProvider, instance=True)
    authorization.get_permission_level = AsyncMock(
        return_value=PermissionLevel.WRITE
    )
    return authorization


@pytest.fixture
def grant(mock_authorization):
    """Set the level the caller holds on every organization."""

    def _grant(level: PermissionLevel) -> None:
        mock_authorization.get_permission_level = AsyncMock(return_value=level)

    return _grant


@pytest.fixture
def gate(mock_authorization) -> MutationGate:
    return MutationGate(
        authorization=mock_authorization,
        probe=create_autospec(MutationGateProbe, instance=True),
    )


@pytest.fixture
def mock_probe():
    return create_autospec(WorkloadServiceProbe, instance=True)


@pytest.fixture
def mock_environment_repository():
    return create_autospec(IEnvironmentRepository, instance=True)


@pytest.fixture
def mock_application_repository():
    return create_autospec(IApplicationRepository, instance=True)


@pytest.fixture
def mock_component_repository():
    return create_autospec(IComponentRepository, instance=True)


@pytest.fixture
def mock_container_group_repository():
    return create_autospec(IContainerGroupRepository, instance=True)


@pytest.fixture
def mock_secret_repository():
    return create_autospec(ISecretRepository, instance=True)


@pytest.fixture
def application() -> Application:
    return Application(
        id=ApplicationId(value=1),
        organization_id=ORG_ID,
        name="shop",
        description="storefront",
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def component() -> Component:
    return Component(
        id=ComponentId(value=2),
        application_id=ApplicationId(value=1),
        name="web",
        image="nginx:1.27",
        deployment_strategy=DeploymentStrategy.ROLLING,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def environment() -> Environment:
    return Environment(
        id=EnvironmentId(value=3), organization_id=ORG_ID, name="prod", created_at=NOW
    )


@pytest.fixture
def container_group() -> ContainerGroup:
    return ContainerGroup(
        id=ContainerGroupId(value=4),
        component_id=ComponentId(value=2),
        environment_id=EnvironmentId(value=3),
        organization_id=ORG_ID,
        size=ContainerSize.SMALL,
        container_count=2,
        created_at=NOW,
    )


@pytest.fixture
def secret() -> Secret:
    return Secret(
        id=SecretId(value=5),
        container_group_id=ContainerGroupId(value=4),
        key="DATABASE_URL",
        value="postgres://db",
        created_at=NOW,
        updated_at=NOW,
    )
