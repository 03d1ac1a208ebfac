"""Unit tests for ApplicationService."""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from workloads.application.services import ApplicationService
from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    DeploymentStrategy,
)
from workloads.ports.exceptions import (
    ApplicationNotFoundError,
    ComponentNotFoundError,
    OrganizationNotVisibleError,
)
from shared_kernel.authorization import PermissionLevel
from shared_kernel.errors import (
    UnauthenticatedError,
    UnauthorizedError,
    ValidationFailedError,
)

APP_ID = ApplicationId(value=1)
COMPONENT_ID = ComponentId(value=2)


@pytest.fixture
def application_service(
    mock_session,
    mock_application_repository,
    mock_component_repository,
    gate,
    mock_probe,
):
    return ApplicationService(
        session=mock_session,
        application_repository=mock_application_repository,
        component_repository=mock_component_repository,
        gate=gate,
        probe=mock_probe,
    )


@pytest.fixture
def stored_application(mock_application_repository, application):
    mock_application_repository.get_by_id = AsyncMock(return_value=application)
    return application


class TestCreateApplication:
    async def test_creates_under_organization(
        self, application_service, mock_application_repository, session_context
    ):
        mock_application_repository.add = AsyncMock(
            side_effect=lambda app: replace(app, id=APP_ID)
        )

        created = await application_service.create_application(
            session_context, 10, name=" shop ", description="storefront"
        )

        assert created.id == APP_ID
        assert created.name == "shop"
        assert created.organization_id == 10

    async def test_non_member_sees_not_found(
        self, application_service, grant, session_context, mock_application_repository
    ):
        grant(PermissionLevel.NONE)

        with pytest.raises(OrganizationNotVisibleError):
            await application_service.create_application(session_context, 10, "shop")
        mock_application_repository.add.assert_not_called()

    async def test_validation_happens_before_store(
        self, application_service, session_context, mock_session
    ):
        with pytest.raises(ValidationFailedError):
            await application_service.create_application(
                session_context, 10, "", "d" * 501
            )
        mock_session.begin.assert_not_called()

    async def test_pending_session_is_unauthenticated(
        self, application_service, pending_context, mock_session
    ):
        with pytest.raises(UnauthenticatedError):
            await application_service.create_application(pending_context, 10, "shop")
        mock_session.begin.assert_not_called()


class TestGetApplication:
    async def test_reader_can_get(
        self, application_service, grant, stored_application, session_context
    ):
        grant(PermissionLevel.READ)

        assert (
            await application_service.get_application(session_context, APP_ID)
            == stored_application
        )

    async def test_missing_and_hidden_look_identical(
        self,
        application_service,
        grant,
        mock_application_repository,
        application,
        session_context,
    ):
        mock_application_repository.get_by_id = AsyncMock(return_value=None)
        with pytest.raises(ApplicationNotFoundError) as missing:
            await application_service.get_application(session_context, APP_ID)

        mock_application_repository.get_by_id = AsyncMock(return_value=application)
        grant(PermissionLevel.NONE)
        with pytest.raises(ApplicationNotFoundError) as hidden:
            await application_service.get_application(session_context, APP_ID)

        assert str(missing.value) == str(hidden.value)
        assert missing.value.kind == hidden.value.kind


class TestUpdateApplication:
    async def test_partial_update(
        self,
        application_service,
        stored_application,
        mock_application_repository,
        session_context,
    ):
        mock_application_repository.update = AsyncMock(side_effect=lambda app: app)

        updated = await application_service.update_application(
            session_context, APP_ID, description="new"
        )

        assert updated.description == "new"
        assert updated.name == stored_application.name

    async def test_reader_cannot_update(
        self,
        application_service,
        grant,
        stored_application,
        mock_application_repository,
        session_context,
    ):
        grant(PermissionLevel.READ)

        with pytest.raises(UnauthorizedError):
            await application_service.update_application(
                session_context, APP_ID, name="x"
            )
        mock_application_repository.update.assert_not_called()

    async def test_row_vanishing_is_not_found(
        self,
        application_service,
        stored_application,
        mock_application_repository,
        session_context,
    ):
        mock_application_repository.update = AsyncMock(return_value=None)

        with pytest.raises(ApplicationNotFoundError):
            await application_service.update_application(
                session_context, APP_ID, name="x"
            )


class TestDeleteApplication:
    async def test_returns_prior_state(
        self,
        application_service,
        stored_application,
        mock_application_repository,
        session_context,
        mock_probe,
    ):
        mock_application_repository.delete = AsyncMock(return_value=True)

        deleted = await application_service.delete_application(
            session_context, APP_ID
        )

        assert deleted == stored_application
        mock_probe.resource_deleted.assert_called_once_with("application", 1)

    async def test_concurrent_delete_is_not_found(
        self,
        application_service,
        stored_application,
        mock_application_repository,
        session_context,
    ):
        mock_application_repository.delete = AsyncMock(return_value=False)

        with pytest.raises(ApplicationNotFoundError):
            await application_service.delete_application(session_context, APP_ID)


class TestComponents:
    async def test_create_parses_strategy(
        self,
        application_service,
        stored_application,
        mock_component_repository,
        session_context,
    ):
        mock_component_repository.add = AsyncMock(
            side_effect=lambda c: replace(c, id=COMPONENT_ID)
        )

        component = await application_service.create_component(
            session_context, APP_ID, "web", "nginx:1.27", "recreate"
        )

        assert component.deployment_strategy is DeploymentStrategy.RECREATE
        assert component.application_id == APP_ID

    async def test_invalid_strategy_is_rejected(
        self, application_service, session_context
    ):
        with pytest.raises(ValidationFailedError):
            await application_service.create_component(
                session_context, APP_ID, "web", "nginx", "canary"
            )

    async def test_update_component_of_other_application(
        self,
        application_service,
        stored_application,
        mock_component_repository,
        session_context,
    ):
        mock_component_repository.get = AsyncMock(return_value=None)

        with pytest.raises(ComponentNotFoundError):
            await application_service.update_component(
                session_context, APP_ID, COMPONENT_ID, image="nginx:2"
            )
        mock_component_repository.get.assert_awaited_once_with(COMPONENT_ID, APP_ID)

    async def test_update_component(
        self,
        application_service,
        stored_application,
        mock_component_repository,
        component,
        session_context,
    ):
        mock_component_repository.get = AsyncMock(return_value=component)
        mock_component_repository.update = AsyncMock(side_effect=lambda c: c)

        updated = await application_service.update_component(
            session_context, APP_ID, COMPONENT_ID, image="nginx:2"
        )

        assert updated.image == "nginx:2"
        assert updated.name == component.name

    async def test_delete_component(
        self,
        application_service,
        stored_application,
        mock_component_repository,
        component,
        session_context,
    ):
        mock_component_repository.get = AsyncMock(return_value=component)
        mock_component_repository.delete = AsyncMock(return_value=True)

        deleted = await application_service.delete_component(
            session_context, APP_ID, COMPONENT_ID
        )

        assert deleted == component
        mock_component_repository.delete.assert_awaited_once_with(
            COMPONENT_ID, APP_ID
        )

    async def test_list_requires_read(
        self,
        application_service,
        grant,
        stored_application,
        session_context,
    ):
        grant(PermissionLevel.NONE)

        with pytest.raises(ApplicationNotFoundError):
            await application_service.list_components(session_context, APP_ID)
