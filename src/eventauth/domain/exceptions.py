"""Exception hierarchy for EventAuth.

Two families live here. Component failures (password verification, token
signing and parsing, persistence) describe exactly what went wrong and stay
inside the server. Outcome errors (BadRequest, Unauthorized, InternalError)
are what the API layer turns into HTTP responses; the auth service translates
component failures into outcomes so callers never learn which check failed.
"""


class EventAuthError(Exception):
    """Base exception for all EventAuth errors."""

    code = "eventauth_error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


# Password verification


class PasswordVerificationError(EventAuthError):
    """Password verification failed."""

    code = "password_verification_failed"


class EmptyCredentialError(PasswordVerificationError):
    """Stored hash or submitted password is empty."""

    code = "empty_credential"


class CredentialMismatchError(PasswordVerificationError):
    """Submitted password does not match the stored hash."""

    code = "credential_mismatch"


# Tokens


class SigningError(EventAuthError):
    """Token could not be signed."""

    code = "signing_error"


class TokenError(EventAuthError):
    """Token was rejected."""

    code = "token_error"


class TokenInvalidError(TokenError):
    """Token signature or structure is invalid."""

    code = "token_invalid"


class TokenExpiredError(TokenError):
    """Token has expired."""

    code = "token_expired"


# Persistence


class CredentialStoreError(EventAuthError):
    """Credential store operation failed."""

    code = "credential_store_error"


class DuplicateUsernameError(CredentialStoreError):
    """A user with this username already exists."""

    code = "duplicate_username"

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username already exists: {username}")


# Request scope


class MissingIdentityError(EventAuthError):
    """Request scope carries no authenticated identity."""

    code = "missing_identity"


# Outcomes mapped to HTTP status codes by the API layer


class BadRequestError(EventAuthError):
    """Malformed or missing input."""

    code = "bad_request"
    status_code = 400


class UnauthorizedError(EventAuthError):
    """Bad credentials or an invalid, expired or malformed token."""

    code = "unauthorized"
    status_code = 401


class InternalError(EventAuthError):
    """Infrastructure failure."""

    code = "internal_error"
    status_code = 500
