"""AdmissionLimiter — fixed-window behaviour driven by a fake clock."""

from __future__ import annotations

import threading

import pytest

from chat_backend.common.exceptions import RateLimitExceeded
from chat_backend.common.rate_limit import AdmissionLimiter, client_identity
from tests.conftest import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> AdmissionLimiter:
    return AdmissionLimiter(limit=60, window_ms=60_000, clock=clock)


def _drive(limiter: AdmissionLimiter, address, key, times: int) -> None:
    for _ in range(times):
        assert limiter.check(address, key) is True


# ── Client identity ─────────────────────────────────────────────────


class TestClientIdentity:

    def test_address_and_key(self):
        assert client_identity("1.2.3.4", "k1") == "1.2.3.4:k1"

    def test_missing_key(self):
        assert client_identity("1.2.3.4", None) == "1.2.3.4:"
        assert client_identity("1.2.3.4", "") == "1.2.3.4:"

    def test_missing_address_uses_placeholder(self):
        assert client_identity(None, None) == "ip:"
        assert client_identity("", "k1") == "ip:k1"


# ── Admission within one window ─────────────────────────────────────


class TestFixedWindow:

    def test_first_request_creates_bucket(self, limiter):
        assert limiter.check("192.168.1.1", None) is True
        bucket = limiter.bucket("192.168.1.1:")
        assert bucket.count == 1
        assert bucket.window_start == 0

    def test_limit_requests_admitted_then_rejected(self, limiter):
        _drive(limiter, "1.2.3.4", None, 60)
        with pytest.raises(RateLimitExceeded, match="Rate limit exceeded"):
            limiter.check("1.2.3.4", None)

    def test_rejected_attempts_still_count(self, limiter):
        _drive(limiter, "1.2.3.4", None, 60)
        for _ in range(3):
            with pytest.raises(RateLimitExceeded):
                limiter.check("1.2.3.4", None)
        assert limiter.bucket("1.2.3.4:").count == 63

    def test_rejection_status_and_retry_after(self, limiter, clock):
        _drive(limiter, "1.2.3.4", None, 60)
        clock.advance(15_000)
        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.check("1.2.3.4", None)
        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after_seconds == 45
        assert exc_info.value.headers == {"Retry-After": "45"}

    def test_window_resets_after_expiry(self, limiter, clock):
        _drive(limiter, "1.2.3.4", None, 60)
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", None)

        clock.now = 60_001
        assert limiter.check("1.2.3.4", None) is True
        bucket = limiter.bucket("1.2.3.4:")
        assert bucket.count == 1
        assert bucket.window_start == 60_001

    def test_exact_window_length_is_still_same_window(self, limiter, clock):
        """Expiry needs strictly more than window_ms to have passed."""
        _drive(limiter, "1.2.3.4", None, 60)
        clock.now = 60_000
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", None)

    def test_burst_across_window_boundary(self, limiter, clock):
        """Fixed window: 2 × limit may pass around a boundary."""
        limiter.check("1.2.3.4", None)
        clock.now = 59_999
        _drive(limiter, "1.2.3.4", None, 59)
        clock.now = 60_001
        _drive(limiter, "1.2.3.4", None, 60)
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", None)

    def test_scenario_limit_then_new_window(self, limiter, clock):
        _drive(limiter, "1.2.3.4", "", 60)
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", "")
        clock.now = 60_001
        assert limiter.check("1.2.3.4", "") is True


# ── Independent identities ──────────────────────────────────────────


class TestIdentities:

    def test_distinct_addresses_are_independent(self, limiter):
        _drive(limiter, "1.2.3.4", None, 60)
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", None)
        assert limiter.check("5.6.7.8", None) is True

    def test_distinct_keys_same_address_are_independent(self, limiter):
        _drive(limiter, "1.2.3.4", "key-a", 60)
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", "key-a")
        assert limiter.check("1.2.3.4", "key-b") is True

    def test_unknown_address_shares_placeholder_bucket(self, limiter):
        _drive(limiter, None, None, 30)
        _drive(limiter, "", "", 30)
        assert limiter.bucket("ip:").count == 60
        with pytest.raises(RateLimitExceeded):
            limiter.check(None, None)

    def test_fresh_limiters_do_not_share_state(self, clock):
        first = AdmissionLimiter(limit=1, clock=clock)
        second = AdmissionLimiter(limit=1, clock=clock)
        first.check("1.2.3.4", None)
        with pytest.raises(RateLimitExceeded):
            first.check("1.2.3.4", None)
        assert second.check("1.2.3.4", None) is True


# ── Housekeeping ────────────────────────────────────────────────────


class TestSweep:

    def test_sweep_removes_only_expired_buckets(self, limiter, clock):
        limiter.check("1.2.3.4", None)
        clock.now = 30_000
        limiter.check("5.6.7.8", None)

        clock.now = 60_001
        assert limiter.sweep() == 1
        assert limiter.bucket("1.2.3.4:") is None
        assert limiter.bucket("5.6.7.8:") is not None
        assert len(limiter) == 1

    def test_sweep_does_not_change_outcomes(self, limiter, clock):
        _drive(limiter, "1.2.3.4", None, 60)
        clock.now = 60_001
        limiter.sweep()
        assert limiter.check("1.2.3.4", None) is True
        assert limiter.bucket("1.2.3.4:").count == 1

    def test_sweep_keeps_live_exhausted_bucket(self, limiter, clock):
        _drive(limiter, "1.2.3.4", None, 60)
        clock.now = 10_000
        assert limiter.sweep() == 0
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", None)

    def test_reset_forgets_everything(self, limiter):
        _drive(limiter, "1.2.3.4", None, 60)
        limiter.reset()
        assert len(limiter) == 0
        assert limiter.check("1.2.3.4", None) is True


# ── Configuration & threading ───────────────────────────────────────


class TestConfiguration:

    def test_custom_limit_and_window(self, clock):
        limiter = AdmissionLimiter(limit=2, window_ms=1_000, clock=clock)
        _drive(limiter, "1.2.3.4", None, 2)
        with pytest.raises(RateLimitExceeded):
            limiter.check("1.2.3.4", None)
        clock.now = 1_001
        assert limiter.check("1.2.3.4", None) is True

    @pytest.mark.parametrize("kwargs", [{"limit": 0}, {"window_ms": 0}])
    def test_rejects_non_positive_settings(self, kwargs):
        with pytest.raises(ValueError):
            AdmissionLimiter(**kwargs)

    def test_default_clock_admits(self):
        limiter = AdmissionLimiter()
        assert limiter.limit == 60
        assert limiter.window_ms == 60_000
        assert limiter.check("1.2.3.4", None) is True

    def test_concurrent_checks_never_exceed_limit(self, clock):
        limiter = AdmissionLimiter(limit=60, clock=clock)
        admitted = []
        rejected = []
        lock = threading.Lock()

        def worker():
            for _ in range(20):
                try:
                    limiter.check("1.2.3.4", None)
                    with lock:
                        admitted.append(1)
                except RateLimitExceeded:
                    with lock:
                        rejected.append(1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(admitted) == 60
        assert len(rejected) == 100
        assert limiter.bucket("1.2.3.4:").count == 160
