"""Unit tests for organization and membership routes."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from iam.application.services import OrganizationService
from iam.domain.aggregates import Membership, Organization
from iam.domain.value_objects import OrganizationId, UserId
from iam.ports.exceptions import LastAdminError, OrganizationNotFoundError
from shared_kernel.authorization import PermissionLevel


@pytest.fixture
def mock_organization_service() -> AsyncMock:
    return AsyncMock(spec=OrganizationService)


@pytest.fixture
def test_client(mock_organization_service, session_context) -> TestClient:
    from iam.dependencies.authentication import get_request_context
    from iam.dependencies.organization import get_organization_service
    from iam.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_organization_service] = (
        lambda: mock_organization_service
    )
    app.dependency_overrides[get_request_context] = lambda: session_context
    app.include_router(router)
    return TestClient(app)


class TestOrganizationRoutes:
    def test_create(self, test_client, mock_organization_service):
        mock_organization_service.create_organization.return_value = Organization(
            id=OrganizationId(value=5), name="Acme", username="acme", member_count=1
        )

        response = test_client.post(
            "/iam/organizations", json={"name": "Acme", "username": "acme"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"] == 5
        assert body["is_personal"] is False

    def test_list(self, test_client, mock_organization_service):
        mock_organization_service.list_organizations.return_value = [
            Organization(
                id=OrganizationId(value=1),
                name="Personal",
                username="alice",
                is_personal=True,
            )
        ]

        response = test_client.get("/iam/organizations")

        assert [org["username"] for org in response.json()] == ["alice"]


class TestMemberRoutes:
    def test_set_level_parses_label(
        self, test_client, mock_organization_service, session_context
    ):
        mock_organization_service.set_member_level.return_value = Membership(
            UserId(value=2), OrganizationId(value=5), PermissionLevel.WRITE
        )

        response = test_client.put(
            "/iam/organizations/5/members/2", json={"level": "write"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["level"] == "write"
        mock_organization_service.set_member_level.assert_awaited_once_with(
            session_context,
            OrganizationId(value=5),
            UserId(value=2),
            PermissionLevel.WRITE,
        )

    def test_unknown_level_rejected_by_schema(self, test_client):
        response = test_client.put(
            "/iam/organizations/5/members/2", json={"level": "owner"}
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_non_positive_id_rejected(self, test_client):
        response = test_client.put(
            "/iam/organizations/0/members/2", json={"level": "read"}
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_hidden_organization_is_404(self, test_client, mock_organization_service):
        mock_organization_service.remove_member.side_effect = (
            OrganizationNotFoundError("Organization 5 not found")
        )

        response = test_client.delete("/iam/organizations/5/members/2")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_last_admin_is_409(self, test_client, mock_organization_service):
        mock_organization_service.remove_member.side_effect = LastAdminError("no")

        response = test_client.delete("/iam/organizations/5/members/2")

        assert response.status_code == status.HTTP_409_CONFLICT
