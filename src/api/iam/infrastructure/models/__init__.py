"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.api_key import APIKeyModel
from iam.infrastructure.models.organization import MembershipModel, OrganizationModel
from iam.infrastructure.models.user import UserModel

__all__ = [
    "APIKeyModel",
    "MembershipModel",
    "OrganizationModel",
    "UserModel",
]
