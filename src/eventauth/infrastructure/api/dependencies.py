"""FastAPI dependencies for the auth service and the request identity.

The token service, password verifier and settings are built once by the
application factory and live on ``app.state``; everything else is assembled
per request from them.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from eventauth.core.config import Settings
from eventauth.core.logging import get_logger
from eventauth.domain.entities import RequestIdentity
from eventauth.domain.exceptions import MissingIdentityError, UnauthorizedError
from eventauth.domain.services import AuthService, CredentialStore
from eventauth.infrastructure.auth import JWTService, PasswordVerifier, get_request_identity
from eventauth.infrastructure.persistence.database import get_db_session
from eventauth.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_jwt_service(request: Request) -> JWTService:
    return request.app.state.jwt_service


def get_password_verifier(request: Request) -> PasswordVerifier:
    return request.app.state.password_verifier


async def get_credential_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CredentialStore:
    """Credential store backed by the request's database session."""
    return UserRepository(session)


def get_auth_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    verifier: Annotated[PasswordVerifier, Depends(get_password_verifier)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> AuthService:
    return AuthService(
        store=store,
        verifier=verifier,
        jwt_service=jwt_service,
        token_validity=settings.token_validity,
    )


def get_current_identity(request: Request) -> RequestIdentity:
    """Identity the authentication middleware attached to this request.

    Raises:
        UnauthorizedError: If the route was reached without an identity.
    """
    try:
        return get_request_identity(request)
    except MissingIdentityError as e:
        logger.error("Protected route reached without identity", path=request.url.path)
        raise UnauthorizedError("Unauthorized") from e


# Type aliases for dependency injection
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
CurrentIdentity = Annotated[RequestIdentity, Depends(get_current_identity)]
