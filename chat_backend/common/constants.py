"""Enums and constants for the chat API."""

from __future__ import annotations

import enum


# ── Messages ────────────────────────────────────────────────────────

class MessageRole(str, enum.Enum):
    user = "user"
    assistant = "assistant"
    system = "system"


# ── Auth / admission ────────────────────────────────────────────────

API_KEY_HEADER = "X-API-Key"
UNKNOWN_CLIENT_ADDRESS = "ip"

DEFAULT_RATE_LIMIT = 60
DEFAULT_RATE_LIMIT_WINDOW_MS = 60_000

# ── Pagination ──────────────────────────────────────────────────────

MAX_PAGE_SIZE = 100
DEFAULT_SESSION_PAGE_SIZE = 20
DEFAULT_MESSAGE_PAGE_SIZE = 50
