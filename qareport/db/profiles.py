"""Database operations for user profiles."""

from typing import Optional
from uuid import UUID

from qareport.core.errors import PersistenceFailed
from qareport.core.logging import get_logger
from qareport.core.schemas_qa import Profile
from qareport.db.supabase_client import get_supabase as get_client

logger = get_logger(__name__)


def get_profile(user_id: UUID) -> Optional[Profile]:
    """Get a profile by user ID (profiles share the auth user's ID)."""
    client = get_client()
    try:
        result = (
            client.table("profiles")
            .select("*")
            .eq("id", str(user_id))
            .execute()
        )
    except Exception as e:
        raise PersistenceFailed(f"Failed to load profile: {e}") from e

    if result.data:
        return Profile(**result.data[0])
    return None


def create_profile(
    user_id: UUID,
    email: str,
    full_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Profile:
    """Create a new profile."""
    client = get_client()
    try:
        result = (
            client.table("profiles")
            .insert(
                {
                    "id": str(user_id),
                    "email": email.lower(),
                    "full_name": full_name,
                    "avatar_url": avatar_url,
                }
            )
            .execute()
        )
    except Exception as e:
        raise PersistenceFailed(f"Failed to create profile: {e}") from e

    if not result.data:
        raise PersistenceFailed("No data returned from create_profile")
    return Profile(**result.data[0])


def get_or_create_profile(
    user_id: UUID,
    email: str,
    full_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> tuple[Profile, bool]:
    """Get existing profile or create new one. Returns (profile, created)."""
    existing = get_profile(user_id)
    if existing:
        return existing, False

    profile = create_profile(user_id, email, full_name=full_name, avatar_url=avatar_url)
    logger.info(f"Created profile for {email}", extra={"user_id": str(user_id)})
    return profile, True
