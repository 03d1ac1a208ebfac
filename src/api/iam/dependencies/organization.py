from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from iam.application.services import OrganizationService
from iam.dependencies.user import (
    get_membership_repository,
    get_organization_repository,
    get_user_repository,
)
from iam.infrastructure.organization_repository import (
    MembershipRepository,
    OrganizationRepository,
)
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session


def get_organization_service_probe() -> OrganizationServiceProbe:
    return DefaultOrganizationServiceProbe()


def get_organization_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    organization_repository: Annotated[
        OrganizationRepository, Depends(get_organization_repository)
    ],
    membership_repository: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    probe: Annotated[
        OrganizationServiceProbe, Depends(get_organization_service_probe)
    ],
) -> OrganizationService:
    return OrganizationService(
        session=session,
        organization_repository=organization_repository,
        membership_repository=membership_repository,
        user_repository=user_repository,
        probe=probe,
    )
