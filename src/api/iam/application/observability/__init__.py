"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations, one per service.
"""

from iam.application.observability.api_key_service_probe import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)
from iam.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.observability.organization_service_probe import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from iam.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "APIKeyServiceProbe",
    "DefaultAPIKeyServiceProbe",
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "OrganizationServiceProbe",
    "DefaultOrganizationServiceProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]
