#!/usr/bin/env python3
"""Chat API smoke check — verify a running deployment answers and is gated.

Checks:
  1. /health responds with HTTP 200 and {"status": "ok"}
  2. /sessions rejects a request without an API key (HTTP 401)
  3. /sessions admits a request carrying --api-key (HTTP 200)

Checks 2 and 3 run only when --api-key is given.

Usage:
    python scripts/smoke_check.py --url http://localhost:4000
    python scripts/smoke_check.py --url http://localhost:4000 --api-key "$API_KEY"
    python scripts/smoke_check.py --json

Exit codes:
    0 = all checks passed
    1 = one or more checks failed
    2 = critical failure (cannot reach target at all)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

import httpx

logger = logging.getLogger("smoke_check")

API_KEY_HEADER = "X-API-Key"
SMOKE_USER_ID = "smoke-check"


class CheckResult:
    """Single smoke check result."""

    def __init__(self, name: str, passed: bool, message: str, detail: str = ""):
        self.name = name
        self.passed = passed
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "passed": self.passed,
            "message": self.message,
            "detail": self.detail,
        }

    def __str__(self) -> str:
        icon = "✅" if self.passed else "❌"
        s = f"{icon} {self.name}: {self.message}"
        if self.detail:
            s += f"\n     {self.detail}"
        return s


class TargetUnreachable(Exception):
    """Raised when the target cannot be contacted at all."""


# ══════════════════════════════════════════════════════════════════════
# Checks
# ══════════════════════════════════════════════════════════════════════

def check_health(client: httpx.Client) -> CheckResult:
    try:
        resp = client.get("/health")
    except httpx.TransportError as e:
        raise TargetUnreachable(str(e)) from e

    if resp.status_code != 200:
        return CheckResult("Health", False, f"HTTP {resp.status_code} (expected 200)")
    try:
        body = resp.json()
    except ValueError:
        return CheckResult("Health", False, "Non-JSON response", resp.text[:200])
    if not isinstance(body, dict) or body.get("status") != "ok":
        status = body.get("status", "missing") if isinstance(body, dict) else "missing"
        return CheckResult(
            "Health", False,
            f"Status: {status} (expected 'ok')",
            f"Response: {json.dumps(body)}",
        )
    return CheckResult("Health", True, "Healthy")


def check_rejects_missing_key(client: httpx.Client) -> CheckResult:
    resp = client.get("/sessions", params={"user_id": SMOKE_USER_ID})
    if resp.status_code == 401:
        return CheckResult("Auth gate", True, "Request without API key rejected (401)")
    return CheckResult(
        "Auth gate", False,
        f"HTTP {resp.status_code} without API key (expected 401)",
        "Is API_KEY configured on the server?",
    )


def check_admits_valid_key(client: httpx.Client, api_key: str) -> CheckResult:
    resp = client.get(
        "/sessions",
        params={"user_id": SMOKE_USER_ID, "page_size": 1},
        headers={API_KEY_HEADER: api_key},
    )
    if resp.status_code == 200:
        return CheckResult("Authenticated request", True, "Sessions listing reachable")
    if resp.status_code == 429:
        return CheckResult("Authenticated request", False, "Rate limited (429)")
    return CheckResult(
        "Authenticated request", False,
        f"HTTP {resp.status_code} (expected 200)",
        resp.text[:200],
    )


def run_smoke_check(
    url: str,
    api_key: Optional[str] = None,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> list[CheckResult]:
    """Run every applicable check against *url*; raises TargetUnreachable."""
    with httpx.Client(base_url=url, timeout=timeout, transport=transport) as client:
        results = [check_health(client)]
        if api_key:
            results.append(check_rejects_missing_key(client))
            results.append(check_admits_valid_key(client, api_key))
    return results


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Chat API smoke check")
    parser.add_argument("--url", type=str, default="http://localhost:4000",
                        help="Base URL to check (default: http://localhost:4000)")
    parser.add_argument("--api-key", type=str, default=None,
                        help="API key to exercise the auth gate with")
    parser.add_argument("--json", dest="output_json", action="store_true",
                        help="Output results as JSON")
    parser.add_argument("--timeout", type=float, default=10.0,
                        help="HTTP timeout in seconds (default: 10)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    try:
        results = run_smoke_check(args.url, api_key=args.api_key, timeout=args.timeout)
    except TargetUnreachable as e:
        logger.error("Cannot reach %s: %s", args.url, e)
        return 2

    if args.output_json:
        print(json.dumps({
            "target": args.url,
            "checks": [r.to_dict() for r in results],
            "all_passed": all(r.passed for r in results),
        }, indent=2))
    else:
        for result in results:
            print(result)

    return 0 if all(r.passed for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
