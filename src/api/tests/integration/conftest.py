"""Fixtures for integration tests against a real SQLite database.

Every service call gets its own session, the way each HTTP request does, so
concurrent calls contend through the database rather than a shared session.
"""

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import iam.infrastructure.models  # noqa: F401
import workloads.infrastructure.models  # noqa: F401
from iam.application.services import OrganizationService, UserService
from iam.domain.aggregates import User
from iam.infrastructure.membership_authorization import (
    MembershipAuthorizationProvider,
)
from iam.infrastructure.organization_repository import (
    MembershipRepository,
    OrganizationRepository,
)
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.models import Base
from infrastructure.settings import CredentialSettings
from shared_kernel.auth import (
    AuthPhase,
    DefaultSessionTokenProbe,
    GrantKind,
    RequestContext,
    SessionTokenCodec,
)
from workloads.application.mutation_gate import MutationGate
from workloads.application.services import (
    ApplicationService,
    ContainerGroupService,
    EnvironmentService,
)
from workloads.infrastructure.application_repository import (
    ApplicationRepository,
    ComponentRepository,
)
from workloads.infrastructure.container_group_repository import (
    ContainerGroupRepository,
    SecretRepository,
)
from workloads.infrastructure.environment_repository import EnvironmentRepository

PASSWORD = "correct horse battery"


class Dockyard:
    """Builds services on fresh sessions from one sessionmaker."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker
        self._sessions: list[AsyncSession] = []
        self.credentials = CredentialSettings(bcrypt_rounds=4)
        self.token_codec = SessionTokenCodec(
            secret_key="integration-secret", probe=DefaultSessionTokenProbe()
        )

    def _session(self) -> AsyncSession:
        session = self._sessionmaker()
        self._sessions.append(session)
        return session

    async def close(self) -> None:
        for session in self._sessions:
            await session.close()

    def users(self) -> UserService:
        session = self._session()
        return UserService(
            session=session,
            user_repository=UserRepository(session=session),
            organization_repository=OrganizationRepository(session=session),
            membership_repository=MembershipRepository(session=session),
            token_codec=self.token_codec,
            settings=self.credentials,
        )

    def organizations(self) -> OrganizationService:
        session = self._session()
        return OrganizationService(
            session=session,
            organization_repository=OrganizationRepository(session=session),
            membership_repository=MembershipRepository(session=session),
            user_repository=UserRepository(session=session),
        )

    def environments(self) -> EnvironmentService:
        session = self._session()
        return EnvironmentService(
            session=session,
            environment_repository=EnvironmentRepository(session=session),
            gate=self._gate(session),
        )

    def applications(self) -> ApplicationService:
        session = self._session()
        return ApplicationService(
            session=session,
            application_repository=ApplicationRepository(session=session),
            component_repository=ComponentRepository(session=session),
            gate=self._gate(session),
        )

    def container_groups(self) -> ContainerGroupService:
        session = self._session()
        return ContainerGroupService(
            session=session,
            application_repository=ApplicationRepository(session=session),
            component_repository=ComponentRepository(session=session),
            environment_repository=EnvironmentRepository(session=session),
            container_group_repository=ContainerGroupRepository(session=session),
            secret_repository=SecretRepository(session=session),
            gate=self._gate(session),
        )

    async def count(self, model) -> int:
        async with self._sessionmaker() as session:
            return (
                await session.execute(select(func.count()).select_from(model))
            ).scalar_one()

    async def permission_level(self, user_id: int, organization_id: int):
        async with self._sessionmaker() as session:
            provider = MembershipAuthorizationProvider(session=session)
            return await provider.get_permission_level(user_id, organization_id)

    async def stored_user(self, username: str) -> User | None:
        async with self._sessionmaker() as session:
            return await UserRepository(session=session).get_by_username(username)

    async def sign_up(self, username: str) -> tuple[RequestContext, int]:
        """Sign up an identity; return its full session and personal org id."""
        result = await self.users().sign_up(
            username=username,
            name=username.title(),
            email=f"{username}@example.com",
            password=PASSWORD,
        )
        context = RequestContext(
            user_id=result.user.id.value,
            grant_kind=GrantKind.SESSION,
            phase=AuthPhase.FULL,
        )
        return context, result.organization.id.value

    @staticmethod
    def _gate(session: AsyncSession) -> MutationGate:
        return MutationGate(
            authorization=MembershipAuthorizationProvider(session=session)
        )


@pytest.fixture
async def dockyard(tmp_path) -> AsyncIterator[Dockyard]:
    """A schema on a file database so separate connections see each other."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'dockyard.db'}")
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    harness = Dockyard(async_sessionmaker(engine, expire_on_commit=False))
    yield harness

    await harness.close()
    await engine.dispose()
