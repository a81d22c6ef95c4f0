"""Authentication dependencies for FastAPI."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from qareport.core.errors import AuthenticationRequired, NotFound, QAReportError
from qareport.core.schemas_qa import Profile, QAReport

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for Authorization header
security = HTTPBearer(auto_error=False)


class AuthContext:
    """Authenticated principal, passed explicitly to every operation that needs it."""

    def __init__(
        self,
        user_id: UUID,
        email: str,
        token: str,
        profile: Optional[Profile] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.token = token
        self.profile = profile

    def owns(self, report: QAReport) -> bool:
        return report.created_by == self.user_id


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthContext]:
    """
    Validate the Supabase JWT on the request and load the user's profile.

    The profile row is created on first authenticated access. Returns None
    when no valid token is present.
    """
    if not credentials:
        return None

    token = credentials.credentials

    try:
        from qareport.db.supabase_client import get_supabase

        # Validates signature and expiry
        auth_response = get_supabase().auth.get_user(token)
    except Exception as e:
        logger.warning(f"Auth error: {e}")
        return None

    if not auth_response or not auth_response.user:
        return None

    supabase_user = auth_response.user
    user_id = UUID(str(supabase_user.id))
    email = supabase_user.email or ""

    profile = None
    try:
        from qareport.db.profiles import get_or_create_profile

        metadata = supabase_user.user_metadata or {}
        profile, created = get_or_create_profile(
            user_id,
            email,
            full_name=metadata.get("full_name"),
            avatar_url=metadata.get("avatar_url"),
        )
        if created:
            logger.info(f"Auto-created profile for {email}")
    except QAReportError as profile_err:
        # Auth still holds without a profile row
        logger.warning(f"Error loading profile: {profile_err}")

    return AuthContext(user_id=user_id, email=email, token=token, profile=profile)


async def require_auth(
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> AuthContext:
    """Require authentication. Raises AuthenticationRequired (401) otherwise."""
    if not auth:
        raise AuthenticationRequired("Not authenticated")
    return auth


def ensure_report_owner(report: QAReport, auth: AuthContext) -> QAReport:
    """
    Hide reports the caller does not own.

    Reports of other users look exactly like missing ones.
    """
    if not auth.owns(report):
        raise NotFound(f"Report {report.id} not found")
    return report
