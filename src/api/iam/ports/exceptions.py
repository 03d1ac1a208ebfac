"""Domain exceptions for IAM bounded context.

These exceptions represent domain-level errors that can occur during
repository and service operations. Each subclasses a shared-kernel error so
that the presentation layer can map it to a response by its kind.
"""

from shared_kernel.errors import (
    ConflictError,
    NotFoundError,
    SecondFactorInvalidError,
    UnauthenticatedError,
)


class DuplicateUsernameError(ConflictError):
    """Raised when a username (or organization handle) is already taken."""

    pass


class DuplicateEmailError(ConflictError):
    """Raised when an email address is already registered.

    Emails are compared case-insensitively.
    """

    pass


class InvalidCredentialsError(UnauthenticatedError):
    """Raised when a username/password pair does not verify.

    The message never says which half was wrong.
    """

    pass


class AccountLockedError(UnauthenticatedError):
    """Raised while an identity is locked after repeated failures."""

    pass


class InvalidSecondFactorCodeError(SecondFactorInvalidError):
    """Raised when a one-time code does not verify."""

    pass


class SecondFactorAlreadyEnabledError(ConflictError):
    pass


class SecondFactorNotEnabledError(ConflictError):
    pass


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization is missing or not visible to the caller."""

    pass


class MembershipNotFoundError(NotFoundError):
    pass


class LastAdminError(ConflictError):
    """Raised when a change would leave an organization without an admin."""

    pass


class PersonalOwnerError(ConflictError):
    """Raised when removing or downgrading a personal organization's owner."""

    pass


class APIKeyNotFoundError(NotFoundError):
    """Raised when an API key cannot be found.

    This exception is raised when attempting to retrieve or operate on
    an API key that does not exist or belongs to another user.
    """

    pass


class APIKeyAlreadyRevokedError(ConflictError):
    """Raised when attempting to revoke an API key that is already revoked.

    This exception indicates that the API key has already been revoked
    and cannot be revoked again.
    """

    pass


class UserNotFoundError(NotFoundError):
    pass
