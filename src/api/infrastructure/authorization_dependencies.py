"""Authorization dependency injection shared across bounded contexts.

Bounded contexts other than IAM take their caller context and permission
evaluator from here, typed by the shared-kernel contracts, so they never
import IAM themselves.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.authentication import get_request_context
from iam.infrastructure.membership_authorization import (
    MembershipAuthorizationProvider,
)
from infrastructure.database.dependencies import get_write_session
from shared_kernel.auth import RequestContext
from shared_kernel.authorization.protocols import AuthorizationProvider


def get_authorization_provider(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> AuthorizationProvider:
    """Get the membership-backed permission evaluator.

    Shares the request's session, so checks run inside the same
    transaction as the mutation they guard.

    Returns:
        Provider implementing the AuthorizationProvider protocol
    """
    return MembershipAuthorizationProvider(session=session)


async def get_caller_context(
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> RequestContext:
    """Get the resolved caller for the current request."""
    return context
