"""Identity attached to a single request after bearer-token validation."""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class RequestIdentity:
    """Authenticated caller of one request.

    Created by the gatekeeper, read by protected handlers, discarded when the
    request completes.

    Attributes:
        user_id: User ID from the token's subject claim.
        username: Username claim from the token.
        token: The bearer token exactly as presented (needed by refresh).
    """

    user_id: uuid.UUID
    username: str
    token: str

    def __repr__(self) -> str:
        # Keep the raw token out of logs and tracebacks
        return f"RequestIdentity(user_id={self.user_id}, username={self.username!r})"
