"""HTTP routes for API key management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services.api_key_service import APIKeyService
from iam.dependencies.api_key import get_api_key_service
from iam.dependencies.authentication import get_request_context
from iam.domain.value_objects import APIKeyId
from iam.presentation.api_keys.models import (
    APIKeyCreatedResponse,
    APIKeyResponse,
    CreateAPIKeyRequest,
)
from shared_kernel.auth import RequestContext
from shared_kernel.errors import DomainError
from shared_kernel.http_errors import http_exception_for, internal_error

router = APIRouter(
    prefix="/api-keys",
    tags=["api-keys"],
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_api_key(
    request: CreateAPIKeyRequest,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> APIKeyCreatedResponse:
    """Create a new API key for the signed-in user.

    The plaintext secret is returned ONLY in this response. Store it securely -
    it cannot be retrieved again. Keys can only be created from a session,
    never with another API key.

    Raises:
        HTTPException: 401 without a full session
        HTTPException: 403 when called with an API key
        HTTPException: 500 for unexpected errors
    """
    try:
        api_key, plaintext_secret = await service.create_api_key(
            context, description=request.description
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("create API key")

    return APIKeyCreatedResponse(
        secret=plaintext_secret,
        **APIKeyResponse.from_domain(api_key).model_dump(),
    )


@router.get("")
async def list_api_keys(
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> list[APIKeyResponse]:
    """List the signed-in user's API keys, newest first.

    Revoked keys stay in the list with ``is_revoked=true``.
    """
    try:
        api_keys = await service.list_api_keys(context)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("list API keys")
    return [APIKeyResponse.from_domain(key) for key in api_keys]


@router.delete("/{api_key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_api_key(
    api_key_id: str,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[APIKeyService, Depends(get_api_key_service)],
) -> None:
    """Revoke an API key.

    A revoked key can no longer be used for authentication but remains
    visible in the API key list with is_revoked=true for audit purposes.

    Raises:
        HTTPException: 422 if API key ID is invalid
        HTTPException: 404 if API key not found
        HTTPException: 409 if API key is already revoked
        HTTPException: 500 for unexpected errors
    """
    try:
        api_key_id_obj = APIKeyId.from_string(api_key_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail={"kind": "validation_failed", "message": "Invalid API key ID"},
        )

    try:
        await service.revoke_api_key(context, api_key_id_obj)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("revoke API key")
