# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Rate limiting, body size limit and security headers."""

import time

import pytest
from httpx import AsyncClient

from empregabem_api import rate_limit
from empregabem_api.config import settings
from empregabem_api.rate_limit import LIMITS

pytestmark = pytest.mark.anyio


async def test_security_headers(client: AsyncClient):
    r = await client.get("/api/v1/health")
    assert r.headers["x-content-type-options"] == "nosniff"
    assert r.headers["x-frame-options"] == "DENY"
    assert "max-age=" in r.headers["strict-transport-security"]
    assert r.headers["content-security-policy"].startswith("default-src 'self'")
    assert r.headers["referrer-policy"] == "strict-origin-when-cross-origin"
    assert "camera=()" in r.headers["permissions-policy"]


async def test_security_headers_on_errors(client: AsyncClient):
    r = await client.get("/api/v1/company/me")
    assert r.status_code == 401
    assert r.headers["x-frame-options"] == "DENY"


async def test_login_rate_limited(client: AsyncClient):
    path = "/api/v1/company/login"
    body = {"email": "ghost@example.com", "password": "Wr0ng!Pass"}
    for _ in range(LIMITS[path]):
        assert (await client.post(path, json=body)).status_code == 401
    r = await client.post(path, json=body)
    assert r.status_code == 429
    assert int(r.headers["retry-after"]) >= 1


async def test_limits_are_per_client(client: AsyncClient):
    path = "/api/v1/auth/request-reset"
    body = {"email": "ghost@example.com", "user_type": "company"}
    for _ in range(LIMITS[path]):
        await client.post(path, json=body, headers={"X-Forwarded-For": "203.0.113.7"})
    blocked = await client.post(path, json=body, headers={"X-Forwarded-For": "203.0.113.7"})
    assert blocked.status_code == 429
    other = await client.post(path, json=body, headers={"X-Forwarded-For": "198.51.100.9, 10.0.0.1"})
    assert other.status_code == 200


async def test_oversized_body_rejected(client: AsyncClient):
    r = await client.post(
        "/api/v1/candidate/login",
        content=b"x" * (settings.max_body_bytes + 1),
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 413


def test_idle_buckets_are_dropped():
    now = 10_000.0
    idle = ("198.51.100.1", "*")
    active = ("198.51.100.2", "*")
    rate_limit._buckets[idle].append(now - rate_limit.WINDOW - 1)
    rate_limit._buckets[active].append(now - 1)

    rate_limit.prune_idle_buckets(now)

    assert idle not in rate_limit._buckets
    assert list(rate_limit._buckets[active]) == [now - 1]


async def test_rotating_forwarded_for_does_not_grow_state(client: AsyncClient):
    for i in range(20):
        await client.get("/api/v1/health", headers={"X-Forwarded-For": f"203.0.113.{i}"})
    assert len(rate_limit._buckets) == 20

    rate_limit.prune_idle_buckets(time.monotonic() + 2 * rate_limit.WINDOW)
    assert len(rate_limit._buckets) == 0
