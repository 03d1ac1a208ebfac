"""Application services for IAM bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the IAM context.
"""

from iam.application.services.api_key_service import APIKeyService
from iam.application.services.grant_resolver import GrantResolver
from iam.application.services.organization_service import OrganizationService
from iam.application.services.user_service import UserService

__all__ = [
    "APIKeyService",
    "GrantResolver",
    "OrganizationService",
    "UserService",
]
