"""Fixtures for workloads route tests."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from workloads.application.services import (
    ApplicationService,
    ContainerGroupService,
    EnvironmentService,
)


@pytest.fixture
def mock_environment_service() -> AsyncMock:
    return AsyncMock(spec=EnvironmentService)


@pytest.fixture
def mock_application_service() -> AsyncMock:
    return AsyncMock(spec=ApplicationService)


@pytest.fixture
def mock_container_group_service() -> AsyncMock:
    return AsyncMock(spec=ContainerGroupService)


@pytest.fixture
def test_client(
    mock_environment_service,
    mock_application_service,
    mock_container_group_service,
    session_context,
) -> TestClient:
    """Client with every workloads service mocked and a signed-in caller."""
    from infrastructure.authorization_dependencies import get_caller_context
    from workloads.dependencies import (
        get_application_service,
        get_container_group_service,
        get_environment_service,
    )
    from workloads.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_caller_context] = lambda: session_context
    app.dependency_overrides[get_environment_service] = (
        lambda: mock_environment_service
    )
    app.dependency_overrides[get_application_service] = (
        lambda: mock_application_service
    )
    app.dependency_overrides[get_container_group_service] = (
        lambda: mock_container_group_service
    )
    app.include_router(router)
    return TestClient(app)
