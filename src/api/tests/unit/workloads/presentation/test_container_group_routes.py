"""Unit tests for container group and secret HTTP routes."""

from fastapi import status

from workloads.domain.value_objects import ContainerGroupId, SecretId
from workloads.ports.exceptions import (
    ContainerGroupNotFoundError,
    DuplicateSecretKeyError,
    EnvironmentNotFoundError,
    SecretNotFoundError,
)


class TestContainerGroupRoutes:
    def test_create(self, test_client, mock_container_group_service, container_group):
        mock_container_group_service.create_container_group.return_value = (
            container_group
        )

        response = test_client.post(
            "/applications/1/container-groups",
            json={
                "component_id": 2,
                "environment_id": 3,
                "size": "small",
                "container_count": 2,
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["organization_id"] == 10
        assert body["size"] == "small"

    def test_environment_in_other_organization(
        self, test_client, mock_container_group_service
    ):
        mock_container_group_service.create_container_group.side_effect = (
            EnvironmentNotFoundError(3)
        )

        response = test_client.post(
            "/applications/1/container-groups",
            json={
                "component_id": 2,
                "environment_id": 3,
                "size": "small",
                "container_count": 1,
            },
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_hidden_group(self, test_client, mock_container_group_service):
        mock_container_group_service.delete_container_group.side_effect = (
            ContainerGroupNotFoundError(4)
        )

        response = test_client.delete("/container-groups/4")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["message"] == "Container group 4 not found"


class TestSecretRoutes:
    def test_list_includes_values(
        self, test_client, mock_container_group_service, secret
    ):
        mock_container_group_service.list_secrets.return_value = [secret]

        response = test_client.get("/container-groups/4/secrets")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {
                "id": 5,
                "container_group_id": 4,
                "key": "DATABASE_URL",
                "value": "postgres://db",
                "created_at": "2026-01-01T00:00:00Z",
                "updated_at": "2026-01-01T00:00:00Z",
            }
        ]

    def test_add(self, test_client, mock_container_group_service, secret):
        mock_container_group_service.add_secret.return_value = secret

        response = test_client.post(
            "/container-groups/4/secrets",
            json={"key": "DATABASE_URL", "value": "postgres://db"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"] == 5

    def test_duplicate_key(self, test_client, mock_container_group_service):
        mock_container_group_service.add_secret.side_effect = DuplicateSecretKeyError(
            "DATABASE_URL"
        )

        response = test_client.post(
            "/container-groups/4/secrets", json={"key": "DATABASE_URL", "value": "x"}
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"]["kind"] == "conflict"

    def test_edit_addresses_secret_in_group(
        self, test_client, mock_container_group_service, secret, session_context
    ):
        mock_container_group_service.edit_secret.return_value = secret

        response = test_client.put(
            "/container-groups/4/secrets/5", json={"value": "postgres://db"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_container_group_service.edit_secret.assert_awaited_once_with(
            session_context,
            ContainerGroupId(value=4),
            SecretId(value=5),
            key=None,
            value="postgres://db",
        )

    def test_delete_vanished_secret(self, test_client, mock_container_group_service):
        mock_container_group_service.delete_secret.side_effect = SecretNotFoundError(
            5
        )

        response = test_client.delete("/container-groups/4/secrets/5")

        assert response.status_code == status.HTTP_404_NOT_FOUND
