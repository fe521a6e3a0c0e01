# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest fixtures. Tests run against an in-memory SQLite database; no server needed."""

import itertools
import os

# Must be set before the app (and its settings) is imported
os.environ["JWT_SECRET"] = "test-secret-0123456789-abcdefghijklmnop"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from empregabem_api.auth import TokenService
from empregabem_api.config import settings
from empregabem_api.database import get_db
from empregabem_api.main import app
from empregabem_api.models import Base
from empregabem_api.rate_limit import reset_rate_limits

STRONG_PASSWORD = "Str0ng!Pass"

_cnpj_seq = itertools.count(10000000000000)
_email_seq = itertools.count(1)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker, token_service):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    # ASGITransport does not run the lifespan
    app.state.token_service = token_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_company(client: AsyncClient):
    """Register a company and return the response body plus auth headers."""

    async def _make(**overrides):
        n = next(_email_seq)
        payload = {
            "name": f"Company {n}",
            "legal_name": f"Company {n} Ltda",
            "cnpj": str(next(_cnpj_seq)),
            "email": f"company{n}@example.com",
            "password": STRONG_PASSWORD,
            "phone": "11999990000",
            "location": "São Paulo, SP",
        }
        payload.update(overrides)
        r = await client.post("/api/v1/company/register", json=payload)
        assert r.status_code == 201, r.text
        body = r.json()
        body["headers"] = bearer(body["token"])
        return body

    return _make


@pytest.fixture
def make_candidate(client: AsyncClient):
    """Register a candidate and return the response body plus auth headers."""

    async def _make(**overrides):
        n = next(_email_seq)
        payload = {
            "name": f"Candidate {n}",
            "email": f"candidate{n}@example.com",
            "password": STRONG_PASSWORD,
            "phone": "21988880000",
            "location": "Rio de Janeiro, RJ",
        }
        payload.update(overrides)
        r = await client.post("/api/v1/candidate/register", json=payload)
        assert r.status_code == 201, r.text
        body = r.json()
        body["headers"] = bearer(body["token"])
        return body

    return _make


def job_payload(**overrides) -> dict:
    payload = {
        "title": "Backend Developer",
        "description": "Build and run our APIs.",
        "location": "São Paulo, SP",
        "salary": 8000,
        "job_type": "CLT",
        "level": "Pleno",
        "requirements": ["Python", "SQL"],
        "benefits": ["VR"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_job(client: AsyncClient):
    """Post a job as the given company and return it."""

    async def _make(company: dict, **overrides):
        r = await client.post("/api/v1/company/jobs", json=job_payload(**overrides), headers=company["headers"])
        assert r.status_code == 201, r.text
        return r.json()

    return _make
