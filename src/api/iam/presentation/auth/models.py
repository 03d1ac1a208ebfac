"""Pydantic models for authentication requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from iam.application.value_objects import IssuedSession, SecondFactorEnrollment
from iam.domain.aggregates import Organization, User


class SignUpRequest(BaseModel):
    """Request model for signup.

    Field rules are enforced by the service so every violation is reported
    at once; only presence and type are checked here.
    """

    username: str = Field(..., description="Unique handle (3-20 characters)")
    name: str = Field(..., description="Display name (1-50 characters)")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class SignInRequest(BaseModel):
    username: str = Field(..., description="Username or email address")
    password: str = Field(..., description="Password")


class SecondFactorCodeRequest(BaseModel):
    code: str = Field(..., description="Six-digit code from the authenticator app")


class ConfirmSecondFactorRequest(BaseModel):
    secret: str = Field(..., description="Secret returned by the enrollment call")
    code: str = Field(..., description="Code generated from that secret")


class DisableSecondFactorRequest(BaseModel):
    password: str = Field(..., description="Current password")


class UserResponse(BaseModel):
    """The signed-in identity."""

    id: int
    username: str
    email: str
    name: str
    has_totp: bool = Field(..., description="Whether a second factor is enrolled")
    is_passwordless: bool = Field(
        ..., description="Whether the identity can sign in with a password"
    )
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response.

        Credential material (hashes, secrets, lockout state) is never included.
        """
        assert user.id is not None
        return cls(
            id=user.id.value,
            username=user.username,
            email=user.email,
            name=user.name,
            has_totp=user.has_totp,
            is_passwordless=user.is_passwordless,
            created_at=user.created_at,
        )


class SessionResponse(BaseModel):
    """Result of sign-in or second-factor completion.

    The token itself travels only in the HTTP-only session cookie.
    """

    requires_second_factor: bool
    user: UserResponse | None = Field(
        None, description="Omitted until the session is fully signed in"
    )

    @classmethod
    def from_domain(cls, issued: IssuedSession) -> SessionResponse:
        if issued.requires_second_factor:
            return cls(requires_second_factor=True)
        return cls(
            requires_second_factor=False, user=UserResponse.from_domain(issued.user)
        )


class SignUpResponse(BaseModel):
    user: UserResponse
    organization_id: int
    organization_username: str

    @classmethod
    def from_domain(cls, user: User, organization: Organization) -> SignUpResponse:
        assert organization.id is not None
        return cls(
            user=UserResponse.from_domain(user),
            organization_id=organization.id.value,
            organization_username=organization.username,
        )


class SecondFactorEnrollmentResponse(BaseModel):
    """A candidate secret, shown once and not yet active."""

    secret: str
    provisioning_uri: str = Field(..., description="otpauth:// URI for QR codes")

    @classmethod
    def from_domain(
        cls, enrollment: SecondFactorEnrollment
    ) -> SecondFactorEnrollmentResponse:
        return cls(
            secret=enrollment.secret,
            provisioning_uri=enrollment.provisioning_uri,
        )
