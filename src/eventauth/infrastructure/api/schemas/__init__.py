"""Pydantic schemas for API request/response validation."""

from eventauth.infrastructure.api.schemas.auth_schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    ValidationErrorDetail,
)
from eventauth.infrastructure.api.schemas.user_schemas import IdentityResponse

__all__ = [
    "ErrorResponse",
    "IdentityResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ValidationErrorDetail",
]
