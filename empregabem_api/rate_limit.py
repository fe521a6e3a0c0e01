# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""In-memory sliding-window rate limiting per client IP (brute-force protection)."""

import math
import time
from collections import defaultdict, deque

from fastapi import HTTPException, Request

from empregabem_api.config import settings

# (client_key, path) -> timestamps of accepted requests inside the window
_buckets: defaultdict[tuple[str, str], deque[float]] = defaultdict(deque)
_last_prune = 0.0
WINDOW = settings.rate_limit_window_seconds
DEFAULT_LIMIT = settings.rate_limit_default
LIMITS: dict[str, int] = {
    "/api/v1/company/login": 10,
    "/api/v1/candidate/login": 10,
    "/api/v1/company/register": 5,
    "/api/v1/candidate/register": 5,
    "/api/v1/auth/request-reset": 5,
    "/api/v1/auth/reset-password": 10,
}


def client_key(request: Request) -> str:
    """Prefer X-Forwarded-For, then X-Real-IP, when behind a proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client:
        return request.client.host or "unknown"
    return "unknown"


def _clean_old(bucket: deque[float], now: float) -> None:
    cutoff = now - WINDOW
    while bucket and bucket[0] <= cutoff:
        bucket.popleft()


def prune_idle_buckets(now: float | None = None) -> None:
    """Drop keys whose requests have all left the window. Runs at most once per window."""
    global _last_prune
    now = time.monotonic() if now is None else now
    if now - _last_prune < WINDOW:
        return
    _last_prune = now
    for key in list(_buckets):
        bucket = _buckets[key]
        _clean_old(bucket, now)
        if not bucket:
            del _buckets[key]


def check_rate_limit(request: Request, path: str, limit: int | None = None) -> None:
    """
    Raise 429 if the client has exceeded the limit for this path.
    Call this at the start of the endpoint (or via a dependency).
    """
    limit = LIMITS.get(path, DEFAULT_LIMIT) if limit is None else limit
    now = time.monotonic()
    prune_idle_buckets(now)
    bucket = _buckets[(client_key(request), path)]
    _clean_old(bucket, now)
    if len(bucket) >= limit:
        retry_after = max(1, math.ceil(bucket[0] + WINDOW - now))
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(retry_after)},
        )
    bucket.append(now)


def reset_rate_limits() -> None:
    """Forget all recorded requests."""
    global _last_prune
    _buckets.clear()
    _last_prune = 0.0


async def rate_limit_auth_dep(request: Request) -> None:
    """FastAPI dependency: rate limit auth endpoints. Add Depends(rate_limit_auth_dep) to routes."""
    path = request.url.path.rstrip("/")
    if path in LIMITS:
        check_rate_limit(request, path)
