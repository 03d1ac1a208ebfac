"""Session and display cookie handling.

The session cookie is HTTP-only and carries the signed session token. The
display cookie is readable by the UI and only says who is signed in; it is
never read back as a credential.
"""

from __future__ import annotations

from fastapi import Response

from iam.application.value_objects import IssuedSession
from infrastructure.settings import SessionSettings
from shared_kernel.auth import AuthPhase, SessionTokenCodec


def set_session_cookies(
    response: Response,
    issued: IssuedSession,
    codec: SessionTokenCodec,
    settings: SessionSettings,
) -> None:
    """Attach the session cookie, and the display cookie for full sessions."""
    full = issued.phase == AuthPhase.FULL
    max_age = settings.ttl_seconds if full else settings.pending_ttl_seconds
    response.set_cookie(
        key=settings.cookie_name,
        value=issued.token,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    if full and issued.user.id is not None:
        response.set_cookie(
            key=settings.display_cookie_name,
            value=codec.sign_display_value(issued.user.id.value),
            max_age=max_age,
            httponly=False,
            secure=settings.cookie_secure,
            samesite="lax",
        )


def clear_session_cookies(response: Response, settings: SessionSettings) -> None:
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    response.delete_cookie(
        key=settings.display_cookie_name,
        secure=settings.cookie_secure,
        samesite="lax",
    )
