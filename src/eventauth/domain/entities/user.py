"""User entity for authentication.

Users are uniquely identified by username and carry the profile attributes
collected at sign-up.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class User:
    """User record as held by the credential store.

    Attributes:
        id: Unique identifier (UUID string).
        username: Login name, unique across the store.
        password_hash: Salted one-way hash (never store plaintext).
        gender: Self-described gender.
        age: Age in years.
        email: Contact email address.
        phone: Contact phone number.
        address: Postal address (optional).
        created_at: Timestamp when the user was created.
    """

    id: str
    username: str
    password_hash: str
    gender: str
    age: int
    email: str
    phone: str
    address: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if not self.id:
            raise ValueError("User ID is required")
        if not self.username:
            raise ValueError("Username is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
