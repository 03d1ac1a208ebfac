from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.application.services import UserService
from iam.dependencies.session_tokens import get_session_token_codec
from iam.infrastructure.organization_repository import (
    MembershipRepository,
    OrganizationRepository,
)
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_credential_settings
from shared_kernel.auth import SessionTokenCodec


def get_user_service_probe() -> UserServiceProbe:
    return DefaultUserServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    return UserRepository(session=session)


def get_organization_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> OrganizationRepository:
    return OrganizationRepository(session=session)


def get_membership_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> MembershipRepository:
    return MembershipRepository(session=session)


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    organization_repository: Annotated[
        OrganizationRepository, Depends(get_organization_repository)
    ],
    membership_repository: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    codec: Annotated[SessionTokenCodec, Depends(get_session_token_codec)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    All repositories share the request's session via FastAPI dependency
    caching, so signup commits or rolls back as one unit.
    """
    return UserService(
        session=session,
        user_repository=user_repository,
        organization_repository=organization_repository,
        membership_repository=membership_repository,
        token_codec=codec,
        settings=get_credential_settings(),
        probe=probe,
    )
