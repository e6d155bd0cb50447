"""Static shared-secret check for the ``X-API-Key`` header."""

from __future__ import annotations

from typing import Mapping, Optional

from chat_backend.common.constants import API_KEY_HEADER
from chat_backend.common.exceptions import AuthenticationError


def get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup over any str→str mapping."""
    value = headers.get(name)
    if value is not None:
        return value
    wanted = name.lower()
    for key, candidate in headers.items():
        if key.lower() == wanted:
            return candidate
    return None


def check_auth(headers: Mapping[str, str], configured_secret: Optional[str]) -> bool:
    """Admit the request or raise ``AuthenticationError``.

    An unset or empty *configured_secret* admits everything. Otherwise the
    header must match it exactly; a present-but-empty header is a mismatch.
    """
    if not configured_secret:
        return True

    presented = get_header(headers, API_KEY_HEADER)
    if not presented or presented != configured_secret:
        raise AuthenticationError("Invalid API key")
    return True
