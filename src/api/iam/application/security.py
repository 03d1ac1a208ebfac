"""Credential store: password, one-time code and API key primitives.

Provides secure secret generation, hashing, and verification. Uses
cryptographically secure random generation and bcrypt for hashing, and
pyotp for RFC 6238 time-based one-time codes. Nothing here touches storage.
"""

import secrets

import bcrypt
import pyotp

from infrastructure.settings import get_credential_settings

API_KEY_PREFIX = "dock_"


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password using bcrypt.

    The cost factor is embedded in the hash, so raising it later never
    invalidates hashes that are already stored.

    Args:
        password: The plaintext password
        rounds: bcrypt cost; defaults to the configured value

    Returns:
        The bcrypt hash as a string
    """
    if rounds is None:
        rounds = get_credential_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its bcrypt hash in constant time.

    Args:
        password: The plaintext password to verify
        password_hash: The stored hash, or None for passwordless identities

    Returns:
        True if the password matches, False otherwise (including for a
        missing or malformed hash)
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash
        return False


def generate_second_factor_secret() -> str:
    """Generate a new base32 TOTP secret."""
    return pyotp.random_base32()


def verify_second_factor_code(
    secret: str, code: str, valid_window: int | None = None
) -> bool:
    """Verify a six-digit time-based one-time code.

    Accepts codes from ``valid_window`` 30-second steps either side of now to
    tolerate clock skew between the server and the authenticator app.

    Args:
        secret: The enrolled base32 secret
        code: The code typed by the user
        valid_window: Accepted steps of skew; defaults to the configured value

    Returns:
        True if the code is valid for the current time window
    """
    if valid_window is None:
        valid_window = get_credential_settings().totp_valid_window
    code = code.strip().replace(" ", "")
    if not code.isdigit():
        return False
    try:
        return pyotp.TOTP(secret).verify(code, valid_window=valid_window)
    except ValueError:
        # Secret is not base32
        return False


def second_factor_provisioning_uri(secret: str, username: str) -> str:
    """Build the ``otpauth://`` URI an authenticator app scans to enroll."""
    issuer = get_credential_settings().totp_issuer
    return pyotp.TOTP(secret).provisioning_uri(name=username, issuer_name=issuer)


def generate_api_key_secret() -> str:
    """Generate a URL-safe API key with dock_ prefix.

    Generates 32 bytes of cryptographically secure random data
    and encodes it as a URL-safe base64 string with the dock_ prefix.

    The dock_ prefix aids in:
    - Secret scanning (easily identifiable in logs/code)
    - Key rotation (clear identification of key source)
    - Debugging (immediately recognizable as an API key)

    Returns:
        A URL-safe API key string with dock_ prefix (e.g., dock_abc123...)
    """
    # underscores keep the whole key selectable with a double click
    random_part = secrets.token_urlsafe(32).replace("-", "_")
    return f"{API_KEY_PREFIX}{random_part}"


def extract_prefix(secret: str) -> str:
    """Extract the first 12 characters as prefix for identification.

    The prefix is stored alongside the hash to enable quick lookup
    without needing to hash the full secret for every comparison.

    Args:
        secret: The full API key secret

    Returns:
        The first 12 characters of the secret
    """
    return secret[:12]


def hash_api_key_secret(secret: str) -> str:
    """Hash an API key secret using bcrypt.

    Args:
        secret: The plaintext API key secret to hash

    Returns:
        The bcrypt hash as a string
    """
    return hash_password(secret)


def verify_api_key_secret(secret: str, key_hash: str) -> bool:
    """Verify a secret against its hash using constant-time comparison.

    Args:
        secret: The plaintext API key secret to verify
        key_hash: The bcrypt hash to verify against

    Returns:
        True if the secret matches the hash, False otherwise
    """
    return verify_password(secret, key_hash)
