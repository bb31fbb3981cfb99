"""Claims carried inside EventAuth bearer tokens."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class TokenClaims(BaseModel):
    """Identity and expiry carried by a signed token.

    Immutable once issued; nothing about a token is stored server-side.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="Unique identifier of the user")
    username: str = Field(..., description="Username at the time of issuance")
    expires_at: datetime = Field(..., description="Instant after which the token is rejected")

    def to_wire(self) -> dict[str, str | int]:
        """Serialize to the JWT claim set ``{sub, username, exp}``."""
        return {
            "sub": self.user_id,
            "username": self.username,
            "exp": int(self.expires_at.timestamp()),
        }


class WireClaims(BaseModel):
    """Claim set as it appears inside a decoded token."""

    model_config = ConfigDict(extra="ignore")

    sub: str = Field(..., min_length=1)
    username: str
    exp: int

    def to_claims(self) -> TokenClaims:
        return TokenClaims(
            user_id=self.sub,
            username=self.username,
            expires_at=datetime.fromtimestamp(self.exp, tz=timezone.utc),
        )
