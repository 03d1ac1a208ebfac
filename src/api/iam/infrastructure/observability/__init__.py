"""Domain-Oriented Observability for IAM infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from iam.infrastructure.observability.api_key_repository_probe import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
)
from iam.infrastructure.observability.authorization_probe import (
    DefaultMembershipAuthorizationProbe,
    MembershipAuthorizationProbe,
)
from iam.infrastructure.observability.repository_probe import (
    DefaultOrganizationRepositoryProbe,
    DefaultUserRepositoryProbe,
    OrganizationRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "APIKeyRepositoryProbe",
    "DefaultAPIKeyRepositoryProbe",
    "MembershipAuthorizationProbe",
    "DefaultMembershipAuthorizationProbe",
    "OrganizationRepositoryProbe",
    "DefaultOrganizationRepositoryProbe",
    "UserRepositoryProbe",
    "DefaultUserRepositoryProbe",
]
