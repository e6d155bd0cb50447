"""Common module — shared utilities for the chat API."""

from chat_backend.common.constants import (
    API_KEY_HEADER,
    DEFAULT_MESSAGE_PAGE_SIZE,
    DEFAULT_RATE_LIMIT,
    DEFAULT_RATE_LIMIT_WINDOW_MS,
    DEFAULT_SESSION_PAGE_SIZE,
    MAX_PAGE_SIZE,
    UNKNOWN_CLIENT_ADDRESS,
    MessageRole,
)
from chat_backend.common.exceptions import (
    AppException,
    AuthenticationError,
    NotFoundException,
    RateLimitExceeded,
    register_exception_handlers,
)
from chat_backend.common.middleware import AccessLogMiddleware, SecurityHeadersMiddleware
from chat_backend.common.pagination import (
    MessagePagination,
    PaginationMeta,
    PaginationParams,
    SessionPagination,
    paginate,
)
from chat_backend.common.rate_limit import AdmissionLimiter, Bucket, client_identity

__all__ = [
    # Constants / Enums
    "MessageRole",
    "API_KEY_HEADER",
    "UNKNOWN_CLIENT_ADDRESS",
    "DEFAULT_RATE_LIMIT",
    "DEFAULT_RATE_LIMIT_WINDOW_MS",
    "DEFAULT_MESSAGE_PAGE_SIZE",
    "DEFAULT_SESSION_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    # Exceptions
    "AppException",
    "AuthenticationError",
    "NotFoundException",
    "RateLimitExceeded",
    "register_exception_handlers",
    # Middleware
    "AccessLogMiddleware",
    "SecurityHeadersMiddleware",
    # Pagination
    "MessagePagination",
    "PaginationMeta",
    "PaginationParams",
    "SessionPagination",
    "paginate",
    # Rate limiting
    "AdmissionLimiter",
    "Bucket",
    "client_identity",
]
