"""HTTP routes for environments."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from workloads.application.services import EnvironmentService
from workloads.dependencies import get_environment_service
from workloads.presentation.environments.models import (
    CreateEnvironmentRequest,
    EnvironmentResponse,
)
from infrastructure.authorization_dependencies import get_caller_context
from shared_kernel.auth import RequestContext
from shared_kernel.errors import DomainError
from shared_kernel.http_errors import http_exception_for, internal_error

router = APIRouter(
    prefix="/organizations/{organization_id}/environments",
    tags=["environments"],
)

OrganizationIdPath = Annotated[int, Path(ge=1)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_environment(
    organization_id: OrganizationIdPath,
    request: CreateEnvironmentRequest,
    context: Annotated[RequestContext, Depends(get_caller_context)],
    service: Annotated[EnvironmentService, Depends(get_environment_service)],
) -> EnvironmentResponse:
    """Create an environment; requires write on the organization.

    Raises:
        HTTPException: 404 if the caller is not a member of the organization
        HTTPException: 403 if the caller only has read access
        HTTPException: 409 if the name is already used in the organization
    """
    try:
        environment = await service.create_environment(
            context, organization_id, request.name
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("create environment")
    return EnvironmentResponse.from_domain(environment)


@router.get("")
async def list_environments(
    organization_id: OrganizationIdPath,
    context: Annotated[RequestContext, Depends(get_caller_context)],
    service: Annotated[EnvironmentService, Depends(get_environment_service)],
) -> list[EnvironmentResponse]:
    try:
        environments = await service.list_environments(context, organization_id)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list environments")
    return [EnvironmentResponse.from_domain(env) for env in environments]
