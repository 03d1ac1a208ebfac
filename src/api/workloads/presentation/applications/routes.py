"""HTTP routes for applications and their components."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from workloads.application.services import ApplicationService
from workloads.dependencies import get_application_service
from workloads.domain.value_objects import ApplicationId, ComponentId
from workloads.presentation.applications.models import (
    ApplicationResponse,
    ComponentResponse,
    CreateApplicationRequest,
    CreateComponentRequest,
    UpdateApplicationRequest,
    UpdateComponentRequest,
)
from infrastructure.authorization_dependencies import get_caller_context
from shared_kernel.auth import RequestContext
from shared_kernel.errors import DomainError
from shared_kernel.http_errors import http_exception_for, internal_error

router = APIRouter(tags=["applications"])

PositiveId = Annotated[int, Path(ge=1)]
Caller = Annotated[RequestContext, Depends(get_caller_context)]
Service = Annotated[ApplicationService, Depends(get_application_service)]


@router.post(
    "/organizations/{organization_id}/applications",
    status_code=status.HTTP_201_CREATED,
)
async def create_application(
    organization_id: PositiveId,
    request: CreateApplicationRequest,
    context: Caller,
    service: Service,
) -> ApplicationResponse:
    """Create an application; requires write on the organization.

    Raises:
        HTTPException: 401 without a fully signed-in grant
        HTTPException: 404 if the caller is not a member of the organization
        HTTPException: 403 if the caller only has read access
        HTTPException: 422 if name or description is invalid
    """
    try:
        application = await service.create_application(
            context,
            organization_id,
            name=request.name,
            description=request.description,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("create application")
    return ApplicationResponse.from_domain(application)


@router.get("/organizations/{organization_id}/applications")
async def list_applications(
    organization_id: PositiveId, context: Caller, service: Service
) -> list[ApplicationResponse]:
    try:
        applications = await service.list_applications(context, organization_id)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list applications")
    return [ApplicationResponse.from_domain(app) for app in applications]


@router.get("/applications/{application_id}")
async def get_application(
    application_id: PositiveId, context: Caller, service: Service
) -> ApplicationResponse:
    try:
        application = await service.get_application(
            context, ApplicationId(value=application_id)
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("load application")
    return ApplicationResponse.from_domain(application)


@router.patch("/applications/{application_id}")
async def update_application(
    application_id: PositiveId,
    request: UpdateApplicationRequest,
    context: Caller,
    service: Service,
) -> ApplicationResponse:
    """Change an application's name and/or description.

    Fields that are omitted or null keep their current value.
    """
    try:
        application = await service.update_application(
            context,
            ApplicationId(value=application_id),
            name=request.name,
            description=request.description,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("update application")
    return ApplicationResponse.from_domain(application)


@router.delete(
    "/applications/{application_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_application(
    application_id: PositiveId, context: Caller, service: Service
) -> None:
    """Delete an application with all its components, container groups and
    secrets."""
    try:
        await service.delete_application(context, ApplicationId(value=application_id))
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("delete application")


@router.get("/applications/{application_id}/components")
async def list_components(
    application_id: PositiveId, context: Caller, service: Service
) -> list[ComponentResponse]:
    try:
        components = await service.list_components(
            context, ApplicationId(value=application_id)
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list components")
    return [ComponentResponse.from_domain(component) for component in components]


@router.post(
    "/applications/{application_id}/components",
    status_code=status.HTTP_201_CREATED,
)
async def create_component(
    application_id: PositiveId,
    request: CreateComponentRequest,
    context: Caller,
    service: Service,
) -> ComponentResponse:
    """Add a component to an application; requires write.

    Raises:
        HTTPException: 422 for an invalid name, image or strategy
    """
    try:
        component = await service.create_component(
            context,
            ApplicationId(value=application_id),
            name=request.name,
            image=request.image,
            deployment_strategy=request.deployment_strategy,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("create component")
    return ComponentResponse.from_domain(component)


@router.patch("/applications/{application_id}/components/{component_id}")
async def update_component(
    application_id: PositiveId,
    component_id: PositiveId,
    request: UpdateComponentRequest,
    context: Caller,
    service: Service,
) -> ComponentResponse:
    """Partially update a component; omitted or null fields are unchanged."""
    try:
        component = await service.update_component(
            context,
            ApplicationId(value=application_id),
            ComponentId(value=component_id),
            name=request.name,
            image=request.image,
            deployment_strategy=request.deployment_strategy,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("update component")
    return ComponentResponse.from_domain(component)


@router.delete(
    "/applications/{application_id}/components/{component_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_component(
    application_id: PositiveId,
    component_id: PositiveId,
    context: Caller,
    service: Service,
) -> None:
    """Delete a component with its container groups and their secrets."""
    try:
        await service.delete_component(
            context,
            ApplicationId(value=application_id),
            ComponentId(value=component_id),
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("delete component")
