"""JWT token service.

Issues, parses and refreshes the signed bearer tokens handed out at login.
Claims are ``{sub, username, exp}``; the signing secret, algorithm and clock
are injected so tests and deployments can override them.
"""

import hashlib
from datetime import datetime, timedelta

import jwt
from pydantic import ValidationError

from eventauth.core.clock import Clock, utc_now
from eventauth.domain.exceptions import SigningError, TokenExpiredError, TokenInvalidError
from eventauth.infrastructure.auth.token_types import TokenClaims, WireClaims


def token_fingerprint(token: str) -> str:
    """Short, non-reversible tag for a token, safe to put in logs."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


class JWTService:
    """Service for creating and validating JWT bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens.
            algorithm: HMAC algorithm name understood by PyJWT.
            clock: Source of the current time for expiry checks.
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    def now(self) -> datetime:
        """Current time according to the injected clock."""
        return self._clock()

    def issue(self, user_id: str, username: str, expires_at: datetime) -> str:
        """Create a signed token.

        Args:
            user_id: The user's unique identifier.
            username: The user's username.
            expires_at: Expiry instant (timezone-aware).

        Returns:
            Encoded JWT.

        Raises:
            SigningError: If the token cannot be signed.
        """
        if not self._secret_key:
            raise SigningError("Token signing key is not configured")

        claims = TokenClaims(user_id=user_id, username=username, expires_at=expires_at)
        try:
            return jwt.encode(claims.to_wire(), self._secret_key, algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            raise SigningError(f"Failed to sign token: {e}") from e

    def parse(self, token: str) -> TokenClaims:
        """Decode and validate a token.

        The signature and structure are checked before expiry, so nothing
        about an unsigned token's claims influences the outcome.

        Args:
            token: The encoded JWT.

        Returns:
            The claims exactly as issued.

        Raises:
            TokenInvalidError: If the signature or structure is invalid.
            TokenExpiredError: If the token has expired.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "require": ["sub", "exp"]},
            )
            claims = WireClaims.model_validate(payload).to_claims()
        except (jwt.PyJWTError, ValidationError, ValueError, OverflowError) as e:
            raise TokenInvalidError("Invalid token") from e

        if claims.expires_at <= self.now():
            raise TokenExpiredError("Token has expired")
        return claims

    def refresh(self, token: str, expires_at: datetime) -> str:
        """Re-issue a valid token with a new expiry.

        The new expiry is at least one second past the old one, so a refresh
        in the same second as issuance still yields a later token.

        Args:
            token: The token being refreshed.
            expires_at: Requested expiry for the new token.

        Returns:
            A new token with the same identity claims.

        Raises:
            TokenInvalidError: If the old token is invalid.
            TokenExpiredError: If the old token has expired.
            SigningError: If the new token cannot be signed.
        """
        claims = self.parse(token)
        expires_at = max(expires_at, claims.expires_at + timedelta(seconds=1))
        return self.issue(claims.user_id, claims.username, expires_at)
