"""Supabase client shared by every table and storage helper."""

from functools import lru_cache

from supabase import Client, create_client

from qareport.core.config import get_settings
from qareport.core.errors import PersistenceFailed
from qareport.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Cached service-role client for the QA report tables and the image bucket.

    Raises:
        PersistenceFailed: If the client cannot be created (bad URL or key)
    """
    settings = get_settings()
    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        raise PersistenceFailed(f"Storage backend unavailable: {e}") from e
