"""Authentication API routes.

Provides endpoints for user registration, login, and token refresh. Login and
register are public; refresh sits behind the authentication middleware.
"""

from fastapi import APIRouter, status

from eventauth.core.logging import get_logger
from eventauth.infrastructure.api.dependencies import AuthServiceDep, CurrentIdentity
from eventauth.infrastructure.api.schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        500: {"model": ErrorResponse, "description": "Token generation failed"},
    },
)
async def login(request: LoginRequest, auth_service: AuthServiceDep) -> LoginResponse:
    """Authenticate with username and password and receive a bearer token.

    An unknown username and a wrong password produce the same 401.
    """
    result = await auth_service.login(request.username, request.password)
    return LoginResponse(token=result.token, username=result.username)


@router.post(
    "/register",
    status_code=status.HTTP_200_OK,
    response_model=RegisterResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body or username taken"},
    },
)
async def register(request: RegisterRequest, auth_service: AuthServiceDep) -> RegisterResponse:
    """Register a new user. No token is issued; log in afterwards."""
    user = await auth_service.register(
        username=request.username,
        password=request.password,
        gender=request.gender,
        age=request.age,
        email=str(request.email),
        phone=request.phone,
        address=request.address,
    )
    return RegisterResponse(id=user.id, username=user.username)


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=RefreshResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    },
)
async def refresh(identity: CurrentIdentity, auth_service: AuthServiceDep) -> RefreshResponse:
    """Exchange the presented bearer token for one with a fresh expiry."""
    token = await auth_service.refresh(identity)
    return RefreshResponse(token=token)
