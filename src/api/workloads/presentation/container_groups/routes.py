"""HTTP routes for container groups and their secrets."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from workloads.application.services import ContainerGroupService
from workloads.dependencies import get_container_group_service
from workloads.domain.value_objects import (
    ApplicationId,
    ComponentId,
    ContainerGroupId,
    EnvironmentId,
    SecretId,
)
from workloads.presentation.container_groups.models import (
    AddSecretRequest,
    ContainerGroupResponse,
    CreateContainerGroupRequest,
    EditSecretRequest,
    SecretResponse,
)
from infrastructure.authorization_dependencies import get_caller_context
from shared_kernel.auth import RequestContext
from shared_kernel.errors import DomainError
from shared_kernel.http_errors import http_exception_for, internal_error

router = APIRouter(tags=["container-groups"])

PositiveId = Annotated[int, Path(ge=1)]
Caller = Annotated[RequestContext, Depends(get_caller_context)]
Service = Annotated[ContainerGroupService, Depends(get_container_group_service)]


@router.post(
    "/applications/{application_id}/container-groups",
    status_code=status.HTTP_201_CREATED,
)
async def create_container_group(
    application_id: PositiveId,
    request: CreateContainerGroupRequest,
    context: Caller,
    service: Service,
) -> ContainerGroupResponse:
    """Deploy a component of the application into an environment.

    Raises:
        HTTPException: 404 if the application is not visible, the component
            is not part of it, or the environment is in another organization
        HTTPException: 422 if size or container count is not allowed
    """
    try:
        container_group = await service.create_container_group(
            context,
            ApplicationId(value=application_id),
            ComponentId(value=request.component_id),
            EnvironmentId(value=request.environment_id),
            size=request.size,
            container_count=request.container_count,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("create container group")
    return ContainerGroupResponse.from_domain(container_group)


@router.get("/applications/{application_id}/container-groups")
async def list_container_groups(
    application_id: PositiveId, context: Caller, service: Service
) -> list[ContainerGroupResponse]:
    try:
        container_groups = await service.list_container_groups(
            context, ApplicationId(value=application_id)
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list container groups")
    return [ContainerGroupResponse.from_domain(group) for group in container_groups]


@router.delete(
    "/container-groups/{container_group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_container_group(
    container_group_id: PositiveId, context: Caller, service: Service
) -> None:
    """Delete a container group and its secrets."""
    try:
        await service.delete_container_group(
            context, ContainerGroupId(value=container_group_id)
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("delete container group")


@router.get("/container-groups/{container_group_id}/secrets")
async def list_secrets(
    container_group_id: PositiveId, context: Caller, service: Service
) -> list[SecretResponse]:
    try:
        secrets = await service.list_secrets(
            context, ContainerGroupId(value=container_group_id)
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list secrets")
    return [SecretResponse.from_domain(secret) for secret in secrets]


@router.post(
    "/container-groups/{container_group_id}/secrets",
    status_code=status.HTTP_201_CREATED,
)
async def add_secret(
    container_group_id: PositiveId,
    request: AddSecretRequest,
    context: Caller,
    service: Service,
) -> SecretResponse:
    """Add a secret; requires write on the group's organization.

    Raises:
        HTTPException: 404 if the container group is not visible
        HTTPException: 409 if the key already exists in the group
    """
    try:
        secret = await service.add_secret(
            context,
            ContainerGroupId(value=container_group_id),
            key=request.key,
            value=request.value,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("add secret")
    return SecretResponse.from_domain(secret)


@router.put("/container-groups/{container_group_id}/secrets/{secret_id}")
async def edit_secret(
    container_group_id: PositiveId,
    secret_id: PositiveId,
    request: EditSecretRequest,
    context: Caller,
    service: Service,
) -> SecretResponse:
    """Change a secret's key and/or value; omitted or null fields are kept.

    Raises:
        HTTPException: 404 if the secret is not in this container group
    """
    try:
        secret = await service.edit_secret(
            context,
            ContainerGroupId(value=container_group_id),
            SecretId(value=secret_id),
            key=request.key,
            value=request.value,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("edit secret")
    return SecretResponse.from_domain(secret)


@router.delete(
    "/container-groups/{container_group_id}/secrets/{secret_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_secret(
    container_group_id: PositiveId,
    secret_id: PositiveId,
    context: Caller,
    service: Service,
) -> None:
    try:
        await service.delete_secret(
            context,
            ContainerGroupId(value=container_group_id),
            SecretId(value=secret_id),
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("delete secret")
