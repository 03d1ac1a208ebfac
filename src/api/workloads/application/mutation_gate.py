"""The single permission choke point for workload operations.

Services call ``authenticate`` before touching the store, load the target
resource, then call ``authorize`` with the organization taken from what they
loaded. The organization id is never taken from caller input except when
creating directly under an organization, where the organization itself is
the target.
"""

from __future__ import annotations

from workloads.application.observability import (
    DefaultMutationGateProbe,
    MutationGateProbe,
)
from shared_kernel.auth.context import RequestContext
from shared_kernel.authorization import AuthorizationProvider, PermissionLevel
from shared_kernel.errors import (
    NotFoundError,
    UnauthenticatedError,
    UnauthorizedError,
)


class MutationGate:
    """Checks a caller's grant and permission level for one organization.

    The authorization provider must share the service's session so the
    check runs inside the same transaction as the mutation.
    """

    def __init__(
        self,
        authorization: AuthorizationProvider,
        probe: MutationGateProbe | None = None,
    ):
        self._authorization = authorization
        self._probe = probe or DefaultMutationGateProbe()

    def authenticate(self, context: RequestContext) -> int:
        """Return the caller's identity id.

        Raises:
            UnauthenticatedError: Without a grant, or for a session that has
                not finished signing in (e.g. ``totp_pending``)
        """
        try:
            return context.require_full_grant()
        except UnauthenticatedError as e:
            self._probe.unauthenticated(reason=str(e))
            raise

    async def authorize(
        self,
        context: RequestContext,
        organization_id: int,
        required: PermissionLevel,
        not_found: NotFoundError,
    ) -> int:
        """Require at least ``required`` on the organization.

        Args:
            context: The caller
            organization_id: Owner of the loaded target resource
            required: Minimum level the operation needs
            not_found: Raised when the caller has no membership at all, so
                a hidden resource looks exactly like a missing one

        Returns:
            The caller's identity id

        Raises:
            UnauthenticatedError: As for ``authenticate``
            NotFoundError: ``not_found`` if the caller has no membership
            UnauthorizedError: If the caller's level is below ``required``
        """
        user_id = self.authenticate(context)
        level = await self._authorization.get_permission_level(
            user_id, organization_id
        )
        if level == PermissionLevel.NONE:
            self._probe.access_denied(
                user_id, organization_id, required.label, level.label
            )
            raise not_found
        if not level.satisfies(required):
            self._probe.access_denied(
                user_id, organization_id, required.label, level.label
            )
            raise UnauthorizedError(
                f"{required.label.capitalize()} access to the organization "
                f"is required"
            )

        self._probe.access_granted(
            user_id, organization_id, required.label, level.label
        )
        return user_id
