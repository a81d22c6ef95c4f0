"""API endpoint for the caller's profile."""

from fastapi import APIRouter, Depends

from qareport.core.auth_middleware import AuthContext, require_auth
from qareport.core.errors import NotFound
from qareport.core.schemas_qa import Profile

router = APIRouter()


@router.get("/me", response_model=Profile)
async def get_my_profile(auth: AuthContext = Depends(require_auth)) -> Profile:
    """Profile of the authenticated user, created on first access."""
    if auth.profile is None:
        raise NotFound("Profile not found")
    return auth.profile
