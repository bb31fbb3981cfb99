"""User API routes. Every route here requires a bearer token."""

from fastapi import APIRouter

from eventauth.infrastructure.api.dependencies import CurrentIdentity
from eventauth.infrastructure.api.schemas import ErrorResponse, IdentityResponse

router = APIRouter()


@router.get(
    "/me",
    response_model=IdentityResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def get_me(identity: CurrentIdentity) -> IdentityResponse:
    """Return the caller's identity as carried by the bearer token."""
    return IdentityResponse(user_id=str(identity.user_id), username=identity.username)
