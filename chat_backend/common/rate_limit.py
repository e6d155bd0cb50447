"""Fixed-window, in-memory rate limiting keyed by client address + API key.

Each client identity owns a ``Bucket`` holding the number of requests seen
in the current window and the time that window opened. The first request
after a window has elapsed resets the bucket instead of incrementing it, so
this is a fixed-window counter rather than a sliding one: a client can pass
up to ``2 * limit`` requests across a window boundary (``limit`` just before
it and ``limit`` right after).

State lives on the ``AdmissionLimiter`` instance. ``create_app()`` builds one
per application and stores it on ``app.state.limiter``; separate processes
therefore enforce separate quotas.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from chat_backend.common.constants import (
    DEFAULT_RATE_LIMIT,
    DEFAULT_RATE_LIMIT_WINDOW_MS,
    UNKNOWN_CLIENT_ADDRESS,
)
from chat_backend.common.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


def client_identity(client_address: Optional[str], presented_key: Optional[str]) -> str:
    """Build the bucket key ``<address or 'ip'>:<presented key or ''>``."""
    return f"{client_address or UNKNOWN_CLIENT_ADDRESS}:{presented_key or ''}"


@dataclass
class Bucket:
    count: int
    window_start: float


class AdmissionLimiter:
    """Per-client fixed-window request counter."""

    def __init__(
        self,
        limit: int = DEFAULT_RATE_LIMIT,
        window_ms: int = DEFAULT_RATE_LIMIT_WINDOW_MS,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_ms < 1:
            raise ValueError("window_ms must be at least 1")
        self.limit = limit
        self.window_ms = window_ms
        self._clock = clock
        self._buckets: dict[str, Bucket] = {}
        # One coarse lock; the critical section is a dict lookup and an add.
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._buckets)

    def bucket(self, identity: str) -> Optional[Bucket]:
        """Return the live bucket for *identity*, if any (for inspection)."""
        return self._buckets.get(identity)

    def check(
        self,
        client_address: Optional[str],
        presented_key: Optional[str],
    ) -> bool:
        """Count one request for the client and admit it or raise ``RateLimitExceeded``.

        The attempt is counted before the quota is compared, so rejected
        requests keep consuming the window.
        """
        identity = client_identity(client_address, presented_key)
        with self._lock:
            now = self._clock()
            bucket = self._buckets.get(identity)
            if bucket is None or now - bucket.window_start > self.window_ms:
                self._buckets[identity] = Bucket(count=1, window_start=now)
                return True

            bucket.count += 1
            if bucket.count <= self.limit:
                return True
            count = bucket.count
            remaining_ms = self.window_ms - (now - bucket.window_start)
            retry_after = max(1, math.ceil(remaining_ms / 1000))

        logger.warning(
            "Rate limit exceeded for %s (%d requests in window)",
            client_address or UNKNOWN_CLIENT_ADDRESS,
            count,
        )
        raise RateLimitExceeded(retry_after_seconds=retry_after)

    def sweep(self) -> int:
        """Drop buckets whose window has expired. Returns how many were removed.

        Admission outcomes are unchanged: an expired bucket would be reset on
        its next hit anyway.
        """
        with self._lock:
            now = self._clock()
            expired = [
                identity
                for identity, bucket in self._buckets.items()
                if now - bucket.window_start > self.window_ms
            ]
            for identity in expired:
                del self._buckets[identity]
        if expired:
            logger.debug("Swept %d expired rate-limit buckets", len(expired))
        return len(expired)

    def reset(self) -> None:
        """Forget every bucket."""
        with self._lock:
            self._buckets.clear()
