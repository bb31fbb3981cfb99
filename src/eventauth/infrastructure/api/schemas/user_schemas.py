"""Pydantic schemas for user endpoints."""

from pydantic import BaseModel, Field


class IdentityResponse(BaseModel):
    """The authenticated caller as seen by protected routes."""

    user_id: str = Field(..., description="User ID from the bearer token")
    username: str = Field(..., description="Username from the bearer token")
