"""Integration tests for cascading deletes and concurrent secret changes."""

import asyncio

import pytest

from workloads.infrastructure.models import (
    ApplicationModel,
    ComponentModel,
    ContainerGroupModel,
    SecretModel,
)
from workloads.ports.exceptions import DuplicateSecretKeyError, SecretNotFoundError

pytestmark = pytest.mark.integration


@pytest.fixture
async def populated(dockyard):
    """Two components, each deployed once, each group holding two secrets."""
    alice, org_id = await dockyard.sign_up("alice")
    environment = await dockyard.environments().create_environment(
        alice, org_id, "production"
    )
    application = await dockyard.applications().create_application(
        alice, org_id, "shop"
    )
    groups = []
    for name in ("web", "worker"):
        component = await dockyard.applications().create_component(
            alice, application.id, name, f"shop/{name}:1", "recreate"
        )
        group = await dockyard.container_groups().create_container_group(
            alice, application.id, component.id, environment.id, "medium", 2
        )
        for key in ("DATABASE_URL", "API_TOKEN"):
            await dockyard.container_groups().add_secret(
                alice, group.id, key, f"{name}-{key.lower()}"
            )
        groups.append(group)
    return alice, application, groups


async def test_deleting_application_removes_everything_beneath(dockyard, populated):
    alice, application, _ = populated

    await dockyard.applications().delete_application(alice, application.id)

    for model in (ApplicationModel, ComponentModel, ContainerGroupModel, SecretModel):
        assert await dockyard.count(model) == 0


async def test_deleting_component_keeps_siblings(dockyard, populated):
    alice, application, groups = populated

    await dockyard.applications().delete_component(
        alice, application.id, groups[0].component_id
    )

    assert await dockyard.count(ComponentModel) == 1
    assert await dockyard.count(ContainerGroupModel) == 1
    remaining = await dockyard.container_groups().list_secrets(alice, groups[1].id)
    assert {secret.key for secret in remaining} == {"DATABASE_URL", "API_TOKEN"}


async def test_concurrent_adds_with_different_keys_both_land(dockyard, populated):
    alice, _, groups = populated
    group_id = groups[0].id

    await asyncio.gather(
        dockyard.container_groups().add_secret(alice, group_id, "FIRST", "1"),
        dockyard.container_groups().add_secret(alice, group_id, "SECOND", "2"),
    )

    secrets = await dockyard.container_groups().list_secrets(alice, group_id)
    assert {"FIRST", "SECOND"} <= {secret.key for secret in secrets}


async def test_racing_deletes_of_one_secret(dockyard, populated):
    alice, _, groups = populated
    group_id = groups[0].id
    [secret, _] = await dockyard.container_groups().list_secrets(alice, group_id)

    results = await asyncio.gather(
        dockyard.container_groups().delete_secret(alice, group_id, secret.id),
        dockyard.container_groups().delete_secret(alice, group_id, secret.id),
        return_exceptions=True,
    )

    assert sorted(type(result).__name__ for result in results) == [
        "NoneType",
        "SecretNotFoundError",
    ]


async def test_edit_racing_delete_of_one_secret(dockyard, populated):
    alice, _, groups = populated
    group_id = groups[0].id
    [secret, sibling] = await dockyard.container_groups().list_secrets(
        alice, group_id
    )

    edited, deleted = await asyncio.gather(
        dockyard.container_groups().edit_secret(
            alice, group_id, secret.id, value="rotated"
        ),
        dockyard.container_groups().delete_secret(alice, group_id, secret.id),
        return_exceptions=True,
    )

    # either order is fine, but the delete always wins in the end
    assert deleted is None
    assert isinstance(edited, SecretNotFoundError) or edited.value == "rotated"
    remaining = await dockyard.container_groups().list_secrets(alice, group_id)
    assert [s.id for s in remaining] == [sibling.id]


async def test_secret_is_addressed_within_its_group(dockyard, populated):
    alice, _, groups = populated
    [secret, _] = await dockyard.container_groups().list_secrets(alice, groups[0].id)

    with pytest.raises(SecretNotFoundError):
        await dockyard.container_groups().edit_secret(
            alice, groups[1].id, secret.id, value="moved"
        )
    with pytest.raises(SecretNotFoundError):
        await dockyard.container_groups().delete_secret(alice, groups[1].id, secret.id)


async def test_duplicate_keys_conflict(dockyard, populated):
    alice, _, groups = populated
    group_id = groups[0].id
    [first, _] = await dockyard.container_groups().list_secrets(alice, group_id)

    with pytest.raises(DuplicateSecretKeyError):
        await dockyard.container_groups().add_secret(
            alice, group_id, "DATABASE_URL", "again"
        )
    with pytest.raises(DuplicateSecretKeyError):
        await dockyard.container_groups().edit_secret(
            alice, group_id, first.id, key="API_TOKEN"
        )
    assert await dockyard.count(SecretModel) == 4
