"""Domain entities for EventAuth."""

from eventauth.domain.entities.identity import RequestIdentity
from eventauth.domain.entities.user import User

__all__ = ["RequestIdentity", "User"]
