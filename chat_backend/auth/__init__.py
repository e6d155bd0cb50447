"""API-key authentication and request admission dependencies."""

from chat_backend.auth.api_key import check_auth, get_header
from chat_backend.auth.dependencies import enforce_rate_limit, require_api_key

__all__ = [
    "check_auth",
    "get_header",
    "enforce_rate_limit",
    "require_api_key",
]
