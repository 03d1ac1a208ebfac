"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        DOCKYARD_DB_HOST: Database host (default: localhost)
        DOCKYARD_DB_PORT: Database port (default: 5432)
        DOCKYARD_DB_DATABASE: Database name (default: dockyard)
        DOCKYARD_DB_USERNAME: Database user (default: dockyard)
        DOCKYARD_DB_PASSWORD: Database password (required in production)
        DOCKYARD_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        DOCKYARD_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKYARD_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="dockyard", description="Database name")
    username: str = Field(default="dockyard", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class SessionSettings(BaseSettings):
    """Session cookie and token settings.

    Sessions are self-contained signed tokens, so the secret key must be
    shared by every API replica.

    Environment variables:
        DOCKYARD_SESSION_SECRET_KEY: HMAC key for session tokens and the
            display cookie (required in production)
        DOCKYARD_SESSION_TTL_SECONDS: Lifetime of a full session (default: 7 days)
        DOCKYARD_SESSION_PENDING_TTL_SECONDS: Lifetime of a session that is
            waiting for a second factor (default: 5 minutes)
        DOCKYARD_SESSION_COOKIE_NAME: Session cookie name (default: session)
        DOCKYARD_SESSION_DISPLAY_COOKIE_NAME: Display cookie name (default: userID)
        DOCKYARD_SESSION_COOKIE_SECURE: Send cookies over HTTPS only (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKYARD_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = Field(
        default=SecretStr("dockyard-dev-secret-change-me"),
        description="Key used to sign session tokens and the display cookie",
    )
    algorithm: str = Field(default="HS256", description="Session token algorithm")
    ttl_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        description="Lifetime of a fully authenticated session",
        ge=60,
    )
    pending_ttl_seconds: int = Field(
        default=5 * 60,
        description="Lifetime of a session waiting on a second factor",
        ge=30,
    )
    cookie_name: str = Field(default="session", description="Session cookie name")
    display_cookie_name: str = Field(
        default="userID", description="Non-HTTP-only display cookie name"
    )
    cookie_secure: bool = Field(
        default=True, description="Only send cookies over HTTPS"
    )

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)

    @property
    def pending_ttl(self) -> timedelta:
        return timedelta(seconds=self.pending_ttl_seconds)


class CredentialSettings(BaseSettings):
    """Password hashing, second-factor and lockout settings.

    Environment variables:
        DOCKYARD_CREDENTIALS_BCRYPT_ROUNDS: bcrypt cost factor (default: 12)
        DOCKYARD_CREDENTIALS_TOTP_ISSUER: Issuer shown in authenticator apps
        DOCKYARD_CREDENTIALS_TOTP_VALID_WINDOW: Accepted clock-skew steps (default: 1)
        DOCKYARD_CREDENTIALS_MAX_FAILED_ATTEMPTS: Failures before lockout (default: 5)
        DOCKYARD_CREDENTIALS_LOCKOUT_BASE_SECONDS: First lockout length (default: 30)
        DOCKYARD_CREDENTIALS_LOCKOUT_MAX_SECONDS: Lockout ceiling (default: 1 hour)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKYARD_CREDENTIALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bcrypt_rounds: int = Field(default=12, description="bcrypt cost", ge=4, le=31)
    totp_issuer: str = Field(default="Dockyard", description="TOTP issuer name")
    totp_valid_window: int = Field(
        default=1, description="Accepted TOTP steps either side of now", ge=0, le=10
    )
    min_password_length: int = Field(
        default=8, description="Minimum password length", ge=1
    )
    max_failed_attempts: int = Field(
        default=5, description="Failed attempts before lockout", ge=1
    )
    lockout_base_seconds: int = Field(
        default=30, description="Length of the first lockout", ge=1
    )
    lockout_max_seconds: int = Field(
        default=60 * 60, description="Maximum lockout length", ge=1
    )

    @model_validator(mode="after")
    def validate_lockout_settings(self) -> "CredentialSettings":
        """Validate lockout max >= base."""
        if self.lockout_max_seconds < self.lockout_base_seconds:
            raise ValueError(
                f"lockout_max_seconds ({self.lockout_max_seconds}) must be >= "
                f"lockout_base_seconds ({self.lockout_base_seconds})"
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Dockyard API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def session(self) -> SessionSettings:
        """Get session settings."""
        return get_session_settings()

    @property
    def credentials(self) -> CredentialSettings:
        """Get credential settings."""
        return get_credential_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_session_settings() -> SessionSettings:
    """Get cached session settings."""
    return SessionSettings()


@lru_cache
def get_credential_settings() -> CredentialSettings:
    """Get cached credential settings."""
    return CredentialSettings()
