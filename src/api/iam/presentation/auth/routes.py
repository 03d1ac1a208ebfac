"""HTTP routes for signup, sign-in and second-factor management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from iam.application.services import GrantResolver, UserService
from iam.dependencies.authentication import (
    get_grant_resolver,
    get_request_context,
    get_session_cookie,
)
from iam.dependencies.session_tokens import get_session_token_codec
from iam.dependencies.user import get_user_service
from iam.presentation.auth.cookies import clear_session_cookies, set_session_cookies
from iam.presentation.auth.models import (
    ConfirmSecondFactorRequest,
    DisableSecondFactorRequest,
    SecondFactorCodeRequest,
    SecondFactorEnrollmentResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
    UserResponse,
)
from infrastructure.settings import get_session_settings
from shared_kernel.auth import RequestContext, SessionTokenCodec
from shared_kernel.errors import DomainError, UnauthenticatedError
from shared_kernel.http_errors import http_exception_for, internal_error

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(
    request: SignUpRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
    codec: Annotated[SessionTokenCodec, Depends(get_session_token_codec)],
) -> SignUpResponse:
    """Create an account and its personal organization, then sign in.

    Raises:
        HTTPException: 422 if any field is invalid (all violations listed)
        HTTPException: 409 if the username or email is taken
        HTTPException: 500 for unexpected errors
    """
    try:
        result = await service.sign_up(
            username=request.username,
            name=request.name,
            email=request.email,
            password=request.password,
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("sign up")

    set_session_cookies(response, result.session, codec, get_session_settings())
    return SignUpResponse.from_domain(result.user, result.organization)


@router.post("/sign-in")
async def sign_in(
    request: SignInRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
    codec: Annotated[SessionTokenCodec, Depends(get_session_token_codec)],
) -> SessionResponse:
    """Sign in with a password.

    When a second factor is enrolled the session cookie holds a pending
    session and ``requires_second_factor`` is true; complete it with
    ``POST /iam/auth/totp/verify``.

    Raises:
        HTTPException: 401 for wrong credentials or a locked account
    """
    try:
        issued = await service.sign_in(request.username, request.password)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("sign in")

    set_session_cookies(response, issued, codec, get_session_settings())
    return SessionResponse.from_domain(issued)


@router.post("/totp/verify")
async def verify_second_factor(
    request: SecondFactorCodeRequest,
    response: Response,
    resolver: Annotated[GrantResolver, Depends(get_grant_resolver)],
    codec: Annotated[SessionTokenCodec, Depends(get_session_token_codec)],
    session_token: Annotated[str | None, Depends(get_session_cookie)],
) -> SessionResponse:
    """Complete a pending sign-in with a one-time code.

    On failure the pending session cookie is left untouched so the user
    can try another code.

    Raises:
        HTTPException: 401 if there is no pending session, the account is
            locked, or the code is wrong
    """
    try:
        if session_token is None:
            raise UnauthenticatedError("No pending sign-in")
        issued = await resolver.complete_second_factor(session_token, request.code)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("verify second factor")

    set_session_cookies(response, issued, codec, get_session_settings())
    return SessionResponse.from_domain(issued)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(response: Response) -> None:
    """Clear the session and display cookies.

    Sessions are stateless tokens, so there is nothing to revoke server-side.
    """
    clear_session_cookies(response, get_session_settings())


@router.get("/me")
async def me(
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Return the signed-in identity."""
    try:
        user = await service.get_me(context)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("load current user")
    return UserResponse.from_domain(user)


@router.post("/totp/enrollment")
async def begin_second_factor_enrollment(
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> SecondFactorEnrollmentResponse:
    """Generate a candidate secret for an authenticator app.

    Nothing is stored until ``POST /iam/auth/totp/confirm`` succeeds.
    """
    try:
        enrollment = await service.begin_second_factor_enrollment(context)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("start second factor enrollment")
    return SecondFactorEnrollmentResponse.from_domain(enrollment)


@router.post("/totp/confirm")
async def confirm_second_factor_enrollment(
    request: ConfirmSecondFactorRequest,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Activate a second factor after checking a code generated from it."""
    try:
        user = await service.confirm_second_factor_enrollment(
            context, secret=request.secret, code=request.code
        )
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("confirm second factor")
    return UserResponse.from_domain(user)


@router.post("/totp/disable")
async def disable_second_factor(
    request: DisableSecondFactorRequest,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Remove the second factor; requires the current password."""
    try:
        user = await service.disable_second_factor(context, request.password)
    except DomainError as e:
        raise http_exception_for(e) from e
    except Exception:
        raise internal_error("disable second factor")
    return UserResponse.from_domain(user)
