"""Authentication dependencies for FastAPI routes.

Every request is resolved into a ``RequestContext``. An ``X-API-Key`` header
takes precedence over the session cookie; a request with neither gets an
anonymous context and is rejected by whichever service needs an identity.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.services import GrantResolver
from iam.dependencies.api_key import get_api_key_repository
from iam.dependencies.session_tokens import get_session_token_codec
from iam.dependencies.user import get_user_repository
from iam.infrastructure.api_key_repository import APIKeyRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_credential_settings, get_session_settings
from shared_kernel.auth import RequestContext, SessionTokenCodec
from shared_kernel.errors import DomainError
from shared_kernel.http_errors import WWW_AUTHENTICATE, http_exception_for


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


def get_grant_resolver(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    api_key_repository: Annotated[APIKeyRepository, Depends(get_api_key_repository)],
    codec: Annotated[SessionTokenCodec, Depends(get_session_token_codec)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> GrantResolver:
    """Get GrantResolver instance sharing the request's session."""
    return GrantResolver(
        session=session,
        user_repository=user_repository,
        api_key_repository=api_key_repository,
        token_codec=codec,
        settings=get_credential_settings(),
        probe=probe,
    )


def get_session_cookie(request: Request) -> str | None:
    """Read the session cookie. The display cookie is never consulted."""
    return request.cookies.get(get_session_settings().cookie_name)


async def get_request_context(
    resolver: Annotated[GrantResolver, Depends(get_grant_resolver)],
    session_token: Annotated[str | None, Depends(get_session_cookie)],
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> RequestContext:
    """Resolve the caller's credential into a RequestContext.

    A session in any phase resolves; operations that need a full sign-in
    reject pending sessions themselves. FastAPI caches the result
    per-request, so the credential is checked once.

    Raises:
        HTTPException 401: If a presented credential is invalid
    """
    try:
        if x_api_key is not None:
            return await resolver.resolve_api_key(x_api_key)
        if session_token is not None:
            return await resolver.resolve_session(session_token, required_phase=None)
    except DomainError as e:
        raise http_exception_for(e) from e
    return RequestContext.anonymous()


async def require_authenticated_context(
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> RequestContext:
    """Reject anonymous requests before any service runs."""
    if not context.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"kind": "unauthenticated", "message": "Not authenticated"},
            headers={"WWW-Authenticate": WWW_AUTHENTICATE},
        )
    return context
