"""Domain services for EventAuth.

Services contain the authentication use cases and the credential store
contract they depend on.
"""

from eventauth.domain.services.auth_service import (
    DEFAULT_TOKEN_VALIDITY,
    AuthService,
    LoginResult,
)
from eventauth.domain.services.credential_store import (
    CredentialStore,
    InMemoryCredentialStore,
)

__all__ = [
    "DEFAULT_TOKEN_VALIDITY",
    "AuthService",
    "CredentialStore",
    "InMemoryCredentialStore",
    "LoginResult",
]
