"""Domain exceptions for the workloads bounded context.

A resource that exists but lives in an organization the caller cannot see
raises the same not-found error, with the same message, as a resource that
does not exist.
"""

from shared_kernel.errors import ConflictError, NotFoundError


class ResourceNotFoundError(NotFoundError):
    """Base for "no such <resource> visible to you" errors."""

    resource = "Resource"

    def __init__(self, resource_id: int):
        super().__init__(f"{self.resource} {resource_id} not found")
        self.resource_id = resource_id


class OrganizationNotVisibleError(ResourceNotFoundError):
    """Raised when the caller holds no membership on the organization."""

    resource = "Organization"


class EnvironmentNotFoundError(ResourceNotFoundError):
    resource = "Environment"


class ApplicationNotFoundError(ResourceNotFoundError):
    resource = "Application"


class ComponentNotFoundError(ResourceNotFoundError):
    """Raised when a component does not exist under the given application."""

    resource = "Component"


class ContainerGroupNotFoundError(ResourceNotFoundError):
    resource = "Container group"


class SecretNotFoundError(ResourceNotFoundError):
    """Raised when a secret does not exist under the given container group.

    Also what the loser of a race to edit or delete the same secret sees.
    """

    resource = "Secret"


class DuplicateEnvironmentNameError(ConflictError):
    def __init__(self, name: str):
        super().__init__(f"Environment '{name}' already exists")


class DuplicateSecretKeyError(ConflictError):
    """Raised when a container group already has a secret with this key."""

    def __init__(self, key: str):
        super().__init__(f"Secret '{key}' already exists in this container group")
        self.key = key
