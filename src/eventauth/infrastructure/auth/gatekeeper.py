"""Bearer-token gatekeeping for protected routes.

AuthGatekeeper turns the Authorization header of a request into a
RequestIdentity or a single UnauthorizedError. Each step fails closed, and
the reason a request was turned away only ever reaches the server log.
"""

import uuid
from collections.abc import Mapping

from eventauth.core.logging import get_logger
from eventauth.domain.entities import RequestIdentity
from eventauth.domain.exceptions import TokenExpiredError, TokenInvalidError, UnauthorizedError
from eventauth.infrastructure.auth.jwt_service import JWTService, token_fingerprint

logger = get_logger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "


class AuthGatekeeper:
    """Validate bearer tokens presented to protected routes."""

    def __init__(self, jwt_service: JWTService) -> None:
        self._jwt_service = jwt_service

    def _deny(self, reason: str, **context: str) -> UnauthorizedError:
        logger.warning("Authentication failed", reason=reason, **context)
        return UnauthorizedError("Unauthorized")

    def authenticate(self, headers: Mapping[str, str]) -> RequestIdentity:
        """Authenticate a request from its headers.

        Args:
            headers: Request headers.

        Returns:
            RequestIdentity: The validated identity.

        Raises:
            UnauthorizedError: On any failure; no other exception escapes.
        """
        try:
            return self._authenticate(headers)
        except UnauthorizedError:
            raise
        except Exception as e:
            logger.error("Unexpected error while authenticating", error=str(e))
            raise UnauthorizedError("Unauthorized") from e

    def _authenticate(self, headers: Mapping[str, str]) -> RequestIdentity:
        auth_header = headers.get(AUTHORIZATION_HEADER)
        if not auth_header or not auth_header.startswith(BEARER_PREFIX):
            raise self._deny("missing_bearer_prefix")

        token = auth_header[len(BEARER_PREFIX):]
        if not token:
            raise self._deny("empty_token")

        try:
            claims = self._jwt_service.parse(token)
        except TokenExpiredError:
            raise self._deny("token_expired", token=token_fingerprint(token))
        except TokenInvalidError:
            raise self._deny("token_invalid", token=token_fingerprint(token))

        try:
            user_id = uuid.UUID(claims.user_id)
        except ValueError:
            raise self._deny("malformed_user_id", user_id=claims.user_id[:64])

        return RequestIdentity(user_id=user_id, username=claims.username, token=token)
