"""Input rules for identities and organizations.

Each function collects every problem it finds and raises them together as a
``ValidationFailedError``.
"""

from __future__ import annotations

import re

from iam.domain.value_objects import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
)
from shared_kernel.errors import Violations

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

# pyotp.random_base32() default
SECOND_FACTOR_SECRET_LENGTH = 32
SECOND_FACTOR_SECRET_PATTERN = re.compile(r"[A-Z2-7]{32}")


def check_username(
    username: str, violations: Violations, field: str = "username"
) -> None:
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        violations.add(
            field,
            f"must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
        )
    if not USERNAME_PATTERN.match(username):
        violations.add(
            field, "may only contain letters, digits, underscores and hyphens"
        )


def check_name(name: str, violations: Violations, field: str = "name") -> None:
    if not NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH:
        violations.add(
            field, f"must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters"
        )


def check_email(email: str, violations: Violations) -> None:
    local, at, domain = email.strip().partition("@")
    if not at or not local or "." not in domain or " " in email.strip():
        violations.add("email", "must be a valid email address")


def validate_signup(
    username: str,
    name: str,
    email: str,
    password: str,
    min_password_length: int,
) -> None:
    """Validate signup input.

    Raises:
        ValidationFailedError: With every violation found
    """
    violations = Violations()
    check_username(username, violations)
    check_name(name, violations)
    check_email(email, violations)
    if len(password) < min_password_length:
        violations.add(
            "password", f"must be at least {min_password_length} characters"
        )
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        violations.add("password", f"must be at most {MAX_PASSWORD_BYTES} bytes")
    violations.raise_if_any()


def validate_organization(name: str, username: str) -> None:
    """Validate a new organization's display name and handle.

    Raises:
        ValidationFailedError: With every violation found
    """
    violations = Violations()
    check_name(name, violations)
    check_username(username, violations)
    violations.raise_if_any()


def validate_second_factor_secret(secret: str) -> None:
    """Check a secret sent back for enrollment has the shape we hand out.

    Raises:
        ValidationFailedError: If the secret is not a base32 string of
            ``SECOND_FACTOR_SECRET_LENGTH`` characters
    """
    violations = Violations()
    if not SECOND_FACTOR_SECRET_PATTERN.fullmatch(secret):
        violations.add(
            "secret",
            f"must be {SECOND_FACTOR_SECRET_LENGTH} base32 characters (A-Z, 2-7)",
        )
    violations.raise_if_any()
