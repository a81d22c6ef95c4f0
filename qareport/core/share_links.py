"""Share tokens for read-only report links.

Tokens are random and carry no information about the report; the mapping
lives in the ``qa_report_share_links`` table and is checked on every view.
"""

import re
import secrets

from qareport.core.config import get_settings

# token_urlsafe alphabet; length bounds cover any sane SHARE_TOKEN_BYTES
_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{16,128}$")


def generate_share_token(num_bytes: int | None = None) -> str:
    """Fresh unguessable URL-safe token."""
    if num_bytes is None:
        num_bytes = get_settings().SHARE_TOKEN_BYTES
    return secrets.token_urlsafe(num_bytes)


def is_well_formed_token(token: str) -> bool:
    """Cheap syntax check before a token is looked up in storage."""
    return bool(_TOKEN_RE.match(token))


def build_share_url(base_url: str, token: str) -> str:
    """Public link to the read-only report page."""
    return f"{base_url.rstrip('/')}/qa/share/{token}"
