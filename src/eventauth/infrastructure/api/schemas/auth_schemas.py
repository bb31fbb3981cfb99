"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for login."""

    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Plaintext password")


class RegisterRequest(BaseModel):
    """Request body for user registration."""

    username: str = Field(..., min_length=1, max_length=255, description="Unique login name")
    password: str = Field(..., min_length=1, description="Plaintext password")
    gender: str = Field(..., min_length=1, max_length=64, description="Self-described gender")
    age: int = Field(..., gt=0, description="Age in years")
    email: EmailStr = Field(..., description="Contact email address")
    phone: str = Field(..., min_length=1, max_length=64, description="Contact phone number")
    address: str | None = Field(None, description="Postal address")


class LoginResponse(BaseModel):
    """Response for a successful login."""

    token: str = Field(..., description="Signed bearer token")
    username: str = Field(..., description="Username the token was issued to")


class RegisterResponse(BaseModel):
    """Response for a successful registration. No token is issued."""

    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Registered username")


class RefreshResponse(BaseModel):
    """Response for a successful token refresh."""

    token: str = Field(..., description="New bearer token with a fresh expiry")


class ValidationErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    message: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Error body returned for every rejected request."""

    error: str = Field(..., description="Error message")
    details: list[ValidationErrorDetail] | None = Field(
        None, description="Per-field validation errors, if any"
    )
