# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""EmpregaBem API - Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from empregabem_api.auth import TokenService
from empregabem_api.config import settings
from empregabem_api.database import init_db
from empregabem_api.rate_limit import check_rate_limit
from empregabem_api.routers import auth, candidates, companies, jobs

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": "default-src 'self'; script-src 'self'; object-src 'none'",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


def _get_cors_origins() -> list[str]:
    raw = (settings.cors_origins or "").strip()
    if raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # A missing or short JWT_SECRET raises ConfigurationError here and aborts startup
    app.state.token_service = TokenService.from_settings(settings)
    await init_db()
    logger.info("EmpregaBem API started (%s)", settings.environment)
    yield
    # shutdown


app = FastAPI(
    title="EmpregaBem API",
    description="Job board API for companies and candidates",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


def _content_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@app.middleware("http")
async def guard_requests(request: Request, call_next):
    """Log each request, enforce body size and global rate limit, add security headers."""
    start = time.perf_counter()
    length = _content_length(request)
    if length is not None and length > settings.max_body_bytes:
        response = JSONResponse(status_code=413, content={"detail": "Request body too large"})
    else:
        try:
            check_rate_limit(request, "*")
        except HTTPException as e:
            response = JSONResponse(status_code=e.status_code, content={"detail": e.detail}, headers=e.headers)
        else:
            response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    duration_ms = (time.perf_counter() - start) * 1000
    # Never log bodies or the Authorization header
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


# API v1
app.include_router(auth.router, prefix="/api/v1")
app.include_router(companies.router, prefix="/api/v1")
app.include_router(candidates.router, prefix="/api/v1")
app.include_router(jobs.router, prefix="/api/v1")


@app.get("/")
async def root():
    """API info."""
    return {
        "name": "EmpregaBem API",
        "version": VERSION,
        "api": "/api/v1",
        "docs": "/api/docs",
    }


@app.get("/api/v1/health")
async def health():
    """Health check for load balancers."""
    return {"status": "ok"}
