"""Environment application service for the workloads context."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from workloads.application.mutation_gate import MutationGate
from workloads.application.observability import (
    DefaultWorkloadServiceProbe,
    WorkloadServiceProbe,
)
from workloads.domain.aggregates import Environment
from workloads.domain.validation import validate_environment
from workloads.ports.exceptions import OrganizationNotVisibleError
from workloads.ports.repositories import IEnvironmentRepository
from shared_kernel.auth.context import RequestContext
from shared_kernel.authorization import PermissionLevel


class EnvironmentService:
    """Creates and lists the environments container groups are placed in."""

    def __init__(
        self,
        session: AsyncSession,
        environment_repository: IEnvironmentRepository,
        gate: MutationGate,
        probe: WorkloadServiceProbe | None = None,
    ):
        self._session = session
        self._environment_repository = environment_repository
        self._gate = gate
        self._probe = probe or DefaultWorkloadServiceProbe()

    async def create_environment(
        self, context: RequestContext, organization_id: int, name: str
    ) -> Environment:
        """Create an environment in an organization; requires write.

        Raises:
            OrganizationNotVisibleError: If the caller is not a member
            UnauthorizedError: If the caller holds only read
            DuplicateEnvironmentNameError: If the name is taken in the org
        """
        self._gate.authenticate(context)
        name = name.strip()
        validate_environment(name)

        try:
            async with self._session.begin():
                await self._gate.authorize(
                    context,
                    organization_id,
                    PermissionLevel.WRITE,
                    not_found=OrganizationNotVisibleError(organization_id),
                )
                environment = await self._environment_repository.add(
                    Environment.create(organization_id=organization_id, name=name)
                )
        except Exception as e:
            self._probe.mutation_failed("create_environment", error=str(e))
            raise

        assert environment.id is not None
        self._probe.resource_created(
            "environment", environment.id.value, organization_id
        )
        return environment

    async def list_environments(
        self, context: RequestContext, organization_id: int
    ) -> list[Environment]:
        """List an organization's environments; requires read."""
        self._gate.authenticate(context)
        async with self._session.begin():
            await self._gate.authorize(
                context,
                organization_id,
                PermissionLevel.READ,
                not_found=OrganizationNotVisibleError(organization_id),
            )
            return await self._environment_repository.list_for_organization(
                organization_id
            )

