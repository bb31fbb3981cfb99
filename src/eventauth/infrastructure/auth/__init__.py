"""Authentication infrastructure components.

This module provides salted password hashing, the JWT token service, and the
bearer-token gatekeeper with its middleware.
"""

from eventauth.infrastructure.auth.gatekeeper import AuthGatekeeper
from eventauth.infrastructure.auth.jwt_service import JWTService, token_fingerprint
from eventauth.infrastructure.auth.middleware import (
    AuthenticationMiddleware,
    get_request_identity,
)
from eventauth.infrastructure.auth.password_hasher import PasswordVerifier
from eventauth.infrastructure.auth.token_types import TokenClaims

__all__ = [
    "AuthGatekeeper",
    "AuthenticationMiddleware",
    "JWTService",
    "PasswordVerifier",
    "TokenClaims",
    "get_request_identity",
    "token_fingerprint",
]
