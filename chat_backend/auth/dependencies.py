"""Admission dependencies — API-key check then per-client rate limit.

Attach both to a router, in this order, to gate every endpoint on it:

    router = APIRouter(dependencies=[Depends(require_api_key), Depends(enforce_rate_limit)])
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from chat_backend.auth.api_key import check_auth, get_header
from chat_backend.common.constants import API_KEY_HEADER
from chat_backend.common.exceptions import AuthenticationError
from chat_backend.common.rate_limit import AdmissionLimiter

logger = logging.getLogger(__name__)

# Declares the header in the OpenAPI schema; validation happens in check_auth.
api_key_scheme = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def _client_address(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


async def require_api_key(
    request: Request,
    _presented: Optional[str] = Security(api_key_scheme),
) -> None:
    """Reject the request with 401 unless the configured API key is presented."""
    try:
        check_auth(request.headers, request.app.state.settings.API_KEY)
    except AuthenticationError:
        logger.warning(
            "Authentication failed: %s %s from %s",
            request.method,
            request.url.path,
            _client_address(request) or "unknown",
        )
        raise


def get_limiter(request: Request) -> AdmissionLimiter:
    return request.app.state.limiter


async def enforce_rate_limit(request: Request) -> None:
    """Count the request against its client's window; 429 once over quota."""
    get_limiter(request).check(
        _client_address(request),
        get_header(request.headers, API_KEY_HEADER),
    )
