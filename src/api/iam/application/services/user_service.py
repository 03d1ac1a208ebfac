"""User application service for IAM bounded context.

Handles signup, password sign-in with lockout, and second-factor
enrollment for the calling identity.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.lockout import record_credential_failure
from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.application.security import (
    generate_second_factor_secret,
    hash_password,
    second_factor_provisioning_uri,
    verify_password,
    verify_second_factor_code,
)
from iam.application.value_objects import (
    IssuedSession,
    SecondFactorEnrollment,
    SignUpResult,
)
from iam.domain.aggregates import Membership, Organization, User
from iam.domain.validation import validate_second_factor_secret, validate_signup
from iam.domain.value_objects import UserId, normalize_email
from iam.ports.exceptions import (
    AccountLockedError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidSecondFactorCodeError,
    SecondFactorAlreadyEnabledError,
    SecondFactorNotEnabledError,
)
from iam.ports.repositories import (
    IMembershipRepository,
    IOrganizationRepository,
    IUserRepository,
)
from infrastructure.settings import CredentialSettings, get_credential_settings
from shared_kernel.auth.context import AuthPhase, RequestContext
from shared_kernel.auth.session_tokens import SessionTokenCodec
from shared_kernel.authorization.types import PermissionLevel
from shared_kernel.errors import UnauthenticatedError


class UserService:
    """Application service for user accounts and password sign-in.

    Manages database transactions: every public method is one unit of work.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        organization_repository: IOrganizationRepository,
        membership_repository: IMembershipRepository,
        token_codec: SessionTokenCodec,
        settings: CredentialSettings | None = None,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user persistence
            organization_repository: Repository for the personal organization
            membership_repository: Repository for the owner's admin membership
            token_codec: Issues session tokens after signup and sign-in
            settings: Password and lockout policy
            probe: Optional domain probe for observability
        """
        self._session = session
        self._user_repository = user_repository
        self._organization_repository = organization_repository
        self._membership_repository = membership_repository
        self._token_codec = token_codec
        self._settings = settings or get_credential_settings()
        self._probe = probe or DefaultUserServiceProbe()

    async def sign_up(
        self,
        username: str,
        name: str,
        email: str,
        password: str,
    ) -> SignUpResult:
        """Create an identity together with its personal organization.

        The personal organization (named "Personal", handle = username), the
        identity and its admin membership are created in one transaction: if
        any step fails nothing is kept.

        Args:
            username: Unique handle, also used for the personal organization
            name: Display name
            email: Email address, unique case-insensitively
            password: Plaintext password

        Returns:
            SignUpResult with a full session for the new identity

        Raises:
            ValidationFailedError: If any field is malformed
            DuplicateUsernameError: If the username or handle is taken
            DuplicateEmailError: If the email is already registered
        """
        name = name.strip()
        validate_signup(
            username=username,
            name=name,
            email=email,
            password=password,
            min_password_length=self._settings.min_password_length,
        )
        password_hash = hash_password(password, rounds=self._settings.bcrypt_rounds)

        try:
            async with self._session.begin():
                if (
                    await self._user_repository.get_by_username(username) is not None
                    or await self._organization_repository.get_by_username(username)
                    is not None
                ):
                    raise DuplicateUsernameError(
                        f"Username '{username}' is already taken"
                    )
                if await self._user_repository.get_by_email(email) is not None:
                    raise DuplicateEmailError("Email address is already registered")

                organization = await self._organization_repository.add(
                    Organization.personal_for(username)
                )
                user = await self._user_repository.add(
                    User.register(
                        username=username,
                        email=email,
                        name=name,
                        password_hash=password_hash,
                    )
                )
                assert user.id is not None and organization.id is not None
                await self._membership_repository.add(
                    Membership(
                        user_id=user.id,
                        organization_id=organization.id,
                        level=PermissionLevel.ADMIN,
                    )
                )
        except Exception as e:
            self._probe.signup_failed(username=username, error=str(e))
            raise

        self._probe.user_signed_up(
            user_id=user.id.value,
            username=username,
            organization_id=organization.id.value,
        )
        token = self._token_codec.issue(user.id.value, AuthPhase.FULL)
        return SignUpResult(
            user=user,
            organization=organization,
            session=IssuedSession(token=token, phase=AuthPhase.FULL, user=user),
        )

    async def sign_in(self, identifier: str, password: str) -> IssuedSession:
        """Verify a password and open a session.

        If the identity has a second factor enrolled the session is issued in
        the ``totp_pending`` phase and must be completed with a one-time code
        before it can do anything else.

        Args:
            identifier: Username or email
            password: Plaintext password

        Returns:
            IssuedSession in phase ``full`` or ``totp_pending``

        Raises:
            AccountLockedError: While the identity is locked out
            InvalidCredentialsError: If the identity is unknown, passwordless,
                or the password is wrong
        """
        now = datetime.now(UTC)
        failure: str | None = None

        async with self._session.begin():
            user = await self._find_by_identifier(identifier)
            if user is None:
                failure = "unknown_identity"
            elif user.is_locked(now):
                failure = "locked"
            elif not verify_password(password, user.password_hash):
                failure = "bad_password"
                user = await record_credential_failure(
                    self._user_repository, user, self._settings, now
                )
            elif user.failed_login_attempts and not user.has_totp:
                user = await self._user_repository.update(user.clear_failed_attempts())

        # The failure counter above must commit, so the error is raised only
        # after the transaction closes.
        if failure is not None:
            self._probe.sign_in_failed(identifier=identifier, reason=failure)
            if user is not None and user.is_locked(now):
                if failure == "bad_password":
                    assert user.id is not None and user.locked_until is not None
                    self._probe.account_locked(user.id.value, user.locked_until)
                raise AccountLockedError(
                    "Too many failed attempts; try again later"
                )
            raise InvalidCredentialsError("Invalid username or password")

        assert user is not None and user.id is not None
        phase = AuthPhase.TOTP_PENDING if user.has_totp else AuthPhase.FULL
        token = self._token_codec.issue(user.id.value, phase)
        self._probe.user_signed_in(
            user_id=user.id.value, second_factor_required=user.has_totp
        )
        return IssuedSession(token=token, phase=phase, user=user)

    async def get_me(self, context: RequestContext) -> User:
        """Return the identity behind a fully authenticated request.

        Raises:
            UnauthenticatedError: If the grant is missing, pending, or its
                identity no longer exists
        """
        user_id = UserId(value=context.require_full_grant())
        async with self._session.begin():
            user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UnauthenticatedError("Identity no longer exists")
        return user

    async def begin_second_factor_enrollment(
        self, context: RequestContext
    ) -> SecondFactorEnrollment:
        """Generate a candidate secret for the caller's authenticator app.

        The secret is not stored; the client sends it back together with a
        code in ``confirm_second_factor_enrollment``.

        Raises:
            SecondFactorAlreadyEnabledError: If a secret is already enrolled
        """
        user = await self.get_me(context)
        if user.has_totp:
            raise SecondFactorAlreadyEnabledError(
                "Two-factor authentication is already enabled"
            )
        secret = generate_second_factor_secret()
        return SecondFactorEnrollment(
            secret=secret,
            provisioning_uri=second_factor_provisioning_uri(secret, user.username),
        )

    async def confirm_second_factor_enrollment(
        self, context: RequestContext, secret: str, code: str
    ) -> User:
        """Persist a candidate secret once the user proves they can use it.

        Raises:
            InvalidSecondFactorCodeError: If the code does not match the secret
            SecondFactorAlreadyEnabledError: If a secret is already enrolled
            ValidationFailedError: If the secret is not one we could have issued
        """
        user_id = UserId(value=context.require_full_grant())
        validate_second_factor_secret(secret)
        try:
            async with self._session.begin():
                user = await self._require_user(user_id)
                if user.has_totp:
                    raise SecondFactorAlreadyEnabledError(
                        "Two-factor authentication is already enabled"
                    )
                if not verify_second_factor_code(
                    secret, code, valid_window=self._settings.totp_valid_window
                ):
                    raise InvalidSecondFactorCodeError("Invalid verification code")
                user = await self._user_repository.update(user.with_totp_secret(secret))
        except Exception as e:
            self._probe.second_factor_change_failed(user_id.value, error=str(e))
            raise

        self._probe.second_factor_enabled(user_id.value)
        return user

    async def disable_second_factor(
        self, context: RequestContext, password: str
    ) -> User:
        """Remove the enrolled secret after re-checking the password.

        Raises:
            InvalidCredentialsError: If the password is wrong
            SecondFactorNotEnabledError: If no secret is enrolled
        """
        user_id = UserId(value=context.require_full_grant())
        try:
            async with self._session.begin():
                user = await self._require_user(user_id)
                if not user.has_totp:
                    raise SecondFactorNotEnabledError(
                        "Two-factor authentication is not enabled"
                    )
                if not verify_password(password, user.password_hash):
                    raise InvalidCredentialsError("Invalid password")
                user = await self._user_repository.update(user.with_totp_secret(None))
        except Exception as e:
            self._probe.second_factor_change_failed(user_id.value, error=str(e))
            raise

        self._probe.second_factor_disabled(user_id.value)
        return user

    async def _find_by_identifier(self, identifier: str) -> User | None:
        if "@" in identifier:
            return await self._user_repository.get_by_email(normalize_email(identifier))
        return await self._user_repository.get_by_username(identifier)

    async def _require_user(self, user_id: UserId) -> User:
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UnauthenticatedError("Identity no longer exists")
        return user
