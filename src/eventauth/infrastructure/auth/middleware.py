"""Authentication middleware for EventAuth.

Every request to a non-public path must carry a valid bearer token. The
middleware runs the gatekeeper, stores the resulting identity on the request
state for downstream handlers and short-circuits with 401 otherwise.
"""

from collections.abc import Iterable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from eventauth.core.logging import get_logger
from eventauth.domain.entities import RequestIdentity
from eventauth.domain.exceptions import MissingIdentityError, UnauthorizedError
from eventauth.infrastructure.auth.gatekeeper import AuthGatekeeper

logger = get_logger(__name__)

IDENTITY_STATE_KEY = "identity"


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to authenticate requests to protected paths."""

    def __init__(
        self,
        app: ASGIApp,
        gatekeeper: AuthGatekeeper,
        public_paths: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.gatekeeper = gatekeeper
        self.public_paths = frozenset(public_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Authenticate the request and enrich request state.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint to call.

        Returns:
            The response from the application, or a bare 401.
        """
        if request.method == "OPTIONS" or request.url.path in self.public_paths:
            return await call_next(request)

        try:
            identity = self.gatekeeper.authenticate(request.headers)
        except UnauthorizedError as e:
            logger.debug("Request rejected", path=request.url.path, method=request.method)
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": e.message},
                headers={"WWW-Authenticate": "Bearer"},
            )

        setattr(request.state, IDENTITY_STATE_KEY, identity)
        return await call_next(request)


def get_request_identity(request: Request) -> RequestIdentity:
    """Read the identity the middleware attached to this request.

    Args:
        request: The current request.

    Returns:
        RequestIdentity: The authenticated identity.

    Raises:
        MissingIdentityError: If no identity is attached, or the attached
            value is not a RequestIdentity.
    """
    identity = getattr(request.state, IDENTITY_STATE_KEY, None)
    if identity is None:
        raise MissingIdentityError("No authenticated identity on request")
    if not isinstance(identity, RequestIdentity):
        raise MissingIdentityError(
            f"Unexpected identity type on request: {type(identity).__name__}"
        )
    return identity
