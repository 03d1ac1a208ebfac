"""HTTP routes for organizations and their members."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from iam.application.services import OrganizationService
from iam.dependencies.authentication import get_request_context
from iam.dependencies.organization import get_organization_service
from iam.domain.value_objects import OrganizationId, UserId
from iam.presentation.organizations.models import (
    CreateOrganizationRequest,
    MembershipResponse,
    OrganizationResponse,
    SetMemberLevelRequest,
)
from shared_kernel.auth import RequestContext
from shared_kernel.authorization.types import PermissionLevel
from shared_kernel.errors import DomainError
from shared_kernel.http_errors import http_exception_for, internal_error

router = APIRouter(
    prefix="/organizations",
    tags=["organizations"],
)

PositiveId = Annotated[int, Path(ge=1)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: CreateOrganizationRequest,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> OrganizationResponse:
    """Create a shared organization; the caller becomes its admin.

    Raises:
        HTTPException: 422 if name or handle is invalid
        HTTPException: 409 if the handle is taken
    """
    try:
        organization = await service.create_organization(
            context, name=request.name, username=request.username
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("create organization")
    return OrganizationResponse.from_domain(organization)


@router.get("")
async def list_organizations(
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> list[OrganizationResponse]:
    """List the organizations the caller is a member of."""
    try:
        organizations = await service.list_organizations(context)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list organizations")
    return [OrganizationResponse.from_domain(org) for org in organizations]


@router.put("/{organization_id}/members/{user_id}")
async def set_member_level(
    organization_id: PositiveId,
    user_id: PositiveId,
    request: SetMemberLevelRequest,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> MembershipResponse:
    """Grant a user a level on the organization, or change their level.

    Raises:
        HTTPException: 404 if the organization is not visible to the caller
        HTTPException: 403 if the caller is not an admin
        HTTPException: 409 if the change would leave no admin
    """
    try:
        membership = await service.set_member_level(
            context,
            OrganizationId(value=organization_id),
            UserId(value=user_id),
            PermissionLevel.from_label(request.level),
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("update membership")
    return MembershipResponse.from_domain(membership)


@router.delete(
    "/{organization_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_member(
    organization_id: PositiveId,
    user_id: PositiveId,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> None:
    """Remove a user from the organization."""
    try:
        await service.remove_member(
            context, OrganizationId(value=organization_id), UserId(value=user_id)
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("remove member")
