"""Input rules for workload resources.

Every function checks only the fields it is given (``None`` means the field
is not being set) and raises all problems at once as a
``ValidationFailedError``. Enumerated values are parsed here, so invalid
sizes, counts or strategies are rejected rather than coerced.
"""

from __future__ import annotations

from workloads.domain.value_objects import (
    ALLOWED_CONTAINER_COUNTS,
    DESCRIPTION_MAX_LENGTH,
    IMAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    SECRET_KEY_MAX_LENGTH,
    ContainerSize,
    DeploymentStrategy,
)
from shared_kernel.errors import Violations


def _check_name(name: str | None, violations: Violations) -> None:
    if name is not None and not (
        NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH
    ):
        violations.add(
            "name", f"must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters"
        )


def _parse_strategy(
    value: str | None, violations: Violations
) -> DeploymentStrategy | None:
    if value is None:
        return None
    try:
        return DeploymentStrategy(value)
    except ValueError:
        allowed = ", ".join(s.value for s in DeploymentStrategy)
        violations.add("deployment_strategy", f"must be one of: {allowed}")
        return None


def validate_environment(name: str) -> None:
    violations = Violations()
    _check_name(name, violations)
    violations.raise_if_any()


def validate_application(name: str | None, description: str | None) -> None:
    """Validate application fields being created or changed.

    Raises:
        ValidationFailedError: With every violation found
    """
    violations = Violations()
    _check_name(name, violations)
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        violations.add(
            "description", f"must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    violations.raise_if_any()


def validate_component(
    name: str | None, image: str | None, deployment_strategy: str | None
) -> DeploymentStrategy | None:
    """Validate component fields being created or changed.

    Returns:
        The parsed deployment strategy, or None if it was not given

    Raises:
        ValidationFailedError: With every violation found
    """
    violations = Violations()
    _check_name(name, violations)
    if image is not None and (
        not image.strip()
        or len(image) > IMAGE_MAX_LENGTH
        or any(c.isspace() for c in image)
    ):
        violations.add(
            "image",
            f"must be a non-empty image reference of at most "
            f"{IMAGE_MAX_LENGTH} characters without whitespace",
        )
    strategy = _parse_strategy(deployment_strategy, violations)
    violations.raise_if_any()
    return strategy


def validate_container_group(size: str, container_count: int) -> ContainerSize:
    """Validate a container group's shape against the allowed sets.

    Returns:
        The parsed size

    Raises:
        ValidationFailedError: If the size or the count is not allowed
    """
    violations = Violations()
    parsed_size: ContainerSize | None = None
    try:
        parsed_size = ContainerSize(size)
    except ValueError:
        allowed = ", ".join(s.value for s in ContainerSize)
        violations.add("size", f"must be one of: {allowed}")
    if (
        isinstance(container_count, bool)
        or container_count not in ALLOWED_CONTAINER_COUNTS
    ):
        violations.add(
            "container_count",
            f"must be between {min(ALLOWED_CONTAINER_COUNTS)} "
            f"and {max(ALLOWED_CONTAINER_COUNTS)}",
        )
    violations.raise_if_any()
    assert parsed_size is not None
    return parsed_size


def validate_secret_key(key: str | None) -> None:
    """Validate a secret key being created or changed.

    Secret values are opaque and accepted as given.

    Raises:
        ValidationFailedError: If the key is blank, too long or has whitespace
    """
    violations = Violations()
    if key is not None and (
        not key
        or len(key) > SECRET_KEY_MAX_LENGTH
        or any(c.isspace() for c in key)
    ):
        violations.add(
            "key",
            f"must be 1-{SECRET_KEY_MAX_LENGTH} characters without whitespace",
        )
    violations.raise_if_any()
