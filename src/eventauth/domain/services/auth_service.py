"""Login, registration and token refresh.

Each call walks one request from Received through Validated to either
Credentialed or Rejected. Input is validated before the credential store or
any cryptography is touched, and every credential or token failure collapses
into the same UnauthorizedError so callers cannot tell which check failed.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

from eventauth.core.logging import get_logger
from eventauth.domain.entities import RequestIdentity, User
from eventauth.domain.exceptions import (
    BadRequestError,
    CredentialStoreError,
    DuplicateUsernameError,
    EmptyCredentialError,
    InternalError,
    PasswordVerificationError,
    SigningError,
    TokenError,
    UnauthorizedError,
)
from eventauth.domain.services.credential_store import CredentialStore
from eventauth.infrastructure.auth.jwt_service import JWTService
from eventauth.infrastructure.auth.password_hasher import PasswordVerifier

logger = get_logger(__name__)

DEFAULT_TOKEN_VALIDITY = timedelta(days=7)

REQUIRED_SIGNUP_FIELDS = ("username", "password", "gender", "age", "email", "phone")


@dataclass(frozen=True)
class LoginResult:
    """Successful login outcome."""

    token: str
    username: str


class AuthService:
    """Authentication use cases composed from injected collaborators."""

    def __init__(
        self,
        store: CredentialStore,
        verifier: PasswordVerifier,
        jwt_service: JWTService,
        token_validity: timedelta = DEFAULT_TOKEN_VALIDITY,
    ) -> None:
        """Initialize the service.

        Args:
            store: Credential store for user lookup and insertion.
            verifier: Salted password hasher/verifier.
            jwt_service: Token codec; its clock is the service's clock.
            token_validity: Lifetime of issued and refreshed tokens.
        """
        self._store = store
        self._verifier = verifier
        self._jwt_service = jwt_service
        self._token_validity = token_validity

    def _new_expiry(self) -> datetime:
        return self._jwt_service.now() + self._token_validity

    async def login(self, username: str, password: str) -> LoginResult:
        """Authenticate a user and issue a token.

        Args:
            username: Submitted username.
            password: Submitted plaintext password.

        Returns:
            LoginResult with the signed token and the stored username.

        Raises:
            BadRequestError: If either field is missing.
            UnauthorizedError: If the username is unknown or the password is wrong.
            InternalError: If the store cannot be read or the token cannot be signed.
        """
        if not username or not password:
            logger.warning("Login rejected: invalid request body")
            raise BadRequestError("invalid request body")

        try:
            user = await self._store.get_by_username(username)
        except CredentialStoreError as e:
            logger.error("User lookup failed", username=username, error=str(e))
            raise InternalError("internal error") from e

        if user is None:
            # Same amount of hashing work as a wrong password
            await asyncio.to_thread(self._verifier.burn, password)
            logger.warning("Login failed: user not found", username=username)
            raise UnauthorizedError("invalid credentials")

        try:
            await asyncio.to_thread(self._verifier.verify, user.password_hash, password)
        except PasswordVerificationError as e:
            logger.warning("Login failed: invalid password", username=username, reason=e.code)
            raise UnauthorizedError("invalid credentials") from e

        try:
            token = self._jwt_service.issue(user.id, user.username, self._new_expiry())
        except SigningError as e:
            logger.error("Failed to sign token", username=username, error=str(e))
            raise InternalError("token generation failed") from e

        logger.info("User logged in", user_id=user.id, username=user.username)
        return LoginResult(token=token, username=user.username)

    async def register(
        self,
        *,
        username: str,
        password: str,
        gender: str,
        age: int,
        email: str,
        phone: str,
        address: str | None = None,
    ) -> User:
        """Create a new user. No token is issued; the caller logs in separately.

        Args:
            username: Unique login name.
            password: Plaintext password, stored only as a salted hash.
            gender: Self-described gender.
            age: Age in years.
            email: Contact email.
            phone: Contact phone number.
            address: Optional postal address.

        Returns:
            The stored user.

        Raises:
            BadRequestError: If a required field is missing, or the store
                refuses the insert (e.g. the username is taken).
        """
        fields = {
            "username": username,
            "password": password,
            "gender": gender,
            "age": age,
            "email": email,
            "phone": phone,
        }
        missing = [name for name in REQUIRED_SIGNUP_FIELDS if not fields[name]]
        if missing:
            logger.warning("Registration rejected: missing fields", fields=missing)
            raise BadRequestError("invalid request body")

        try:
            password_hash = await asyncio.to_thread(self._verifier.hash, password)
        except EmptyCredentialError as e:
            raise BadRequestError("invalid request body") from e

        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=password_hash,
            gender=gender,
            age=age,
            email=email,
            phone=phone,
            address=address or "",
        )

        try:
            await self._store.insert(user)
        except DuplicateUsernameError as e:
            logger.warning("Registration failed: username taken", username=username)
            raise BadRequestError("failed to insert user") from e
        except CredentialStoreError as e:
            logger.error("Failed to insert user", username=username, error=str(e))
            raise BadRequestError("failed to insert user") from e

        logger.info("User registered", user_id=user.id, username=username)
        return user

    async def refresh(self, identity: RequestIdentity) -> str:
        """Issue a new token for the identity's current token.

        The gatekeeper has already accepted the token, but it is validated
        again here; it may have expired in between.

        Args:
            identity: Identity attached to the request by the gatekeeper.

        Returns:
            A new token with a fresh expiry.

        Raises:
            UnauthorizedError: If the token no longer validates or cannot be re-signed.
        """
        try:
            return self._jwt_service.refresh(identity.token, self._new_expiry())
        except (TokenError, SigningError) as e:
            logger.warning(
                "Token refresh failed", user_id=str(identity.user_id), reason=e.code
            )
            raise UnauthorizedError("token generation failed") from e
