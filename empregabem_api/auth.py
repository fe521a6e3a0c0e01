# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication: password hashing, JWT session/reset tokens and access control."""

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from empregabem_api.config import Settings, settings

logger = logging.getLogger(__name__)

SESSION_ISSUER = "empregabem-api"
RESET_ISSUER = "empregabem-api-reset"
SIGNING_ALGORITHM = "HS256"
# HMAC family only: "none" and asymmetric algorithms are never accepted
ALLOWED_ALGORITHMS = ["HS256", "HS384", "HS512"]
MAX_TOKEN_BYTES = 1024
MIN_SECRET_BYTES = 32

MIN_PASSWORD_LENGTH = 8
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)


class SubjectKind(str, Enum):
    """The two account categories. Carried in every token, never inferred."""

    COMPANY = "company"
    CANDIDATE = "candidate"


class ConfigurationError(RuntimeError):
    """Deployment problem (missing or short secret). Not recoverable at runtime."""


class WeakPasswordError(ValueError):
    """Password does not meet the strength policy. The message says why."""


class InvalidTokenError(Exception):
    """Token failed validation. Callers must not reveal which check failed."""


class ExpiredTokenError(InvalidTokenError):
    """Token is past its expiry instant."""


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against its hash. A malformed hash is a mismatch."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain: str, hashed: str) -> bool:
    return await run_in_threadpool(verify_password, plain, hashed)


# Login timing equalization: verify against this when the account is missing.
DUMMY_PASSWORD_HASH = hash_password("empregabem-timing-dummy")


def validate_password_strength(password: str) -> None:
    """Raise WeakPasswordError unless the password meets the policy."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    has_upper = re.search(r"[A-Z]", password) is not None
    has_lower = re.search(r"[a-z]", password) is not None
    has_digit = re.search(r"[0-9]", password) is not None
    has_symbol = any(c in PASSWORD_SYMBOLS for c in password)
    if not (has_upper and has_lower and has_digit and has_symbol):
        raise WeakPasswordError(
            "Password must contain uppercase and lowercase letters, numbers and special characters"
        )


def sanitize_email(email: str) -> str:
    """Normalize an email address for lookup and storage."""
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionClaims:
    subject_id: str
    subject_kind: SubjectKind
    issued_at: datetime
    expires_at: datetime
    issuer: str


@dataclass(frozen=True)
class ResetClaims:
    email: str
    subject_kind: SubjectKind
    token_hash: str
    issued_at: datetime
    expires_at: datetime


def _timestamp(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), timezone.utc)


@dataclass(frozen=True)
class TokenService:
    """Issues and validates signed session and password-reset tokens.

    Built once at startup and shared read-only by all requests. Construction
    fails with ConfigurationError when the secret is shorter than 32 bytes.
    """

    secret: str = field(repr=False)
    session_ttl: timedelta = timedelta(hours=24)
    reset_ttl: timedelta = timedelta(minutes=15)

    def __post_init__(self) -> None:
        if len((self.secret or "").encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigurationError(f"JWT_SECRET must be at least {MIN_SECRET_BYTES} bytes")

    @classmethod
    def from_settings(cls, cfg: Settings) -> "TokenService":
        return cls(
            secret=cfg.jwt_secret,
            session_ttl=timedelta(hours=cfg.session_token_hours),
            reset_ttl=timedelta(minutes=cfg.reset_token_minutes),
        )

    def _encode(self, claims: dict[str, Any]) -> str:
        return jwt.encode(claims, self.secret, algorithm=SIGNING_ALGORITHM)

    def _decode(self, token: str, issuer: str) -> dict[str, Any]:
        if not token or len(token.encode("utf-8")) > MAX_TOKEN_BYTES:
            raise InvalidTokenError("token empty or too large")
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidTokenError("malformed token") from e
        if header.get("alg") not in ALLOWED_ALGORITHMS:
            raise InvalidTokenError("unexpected signing algorithm")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=ALLOWED_ALGORITHMS,
                issuer=issuer,
                options={"require_exp": True, "require_iat": True, "require_iss": True},
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError("token expired") from e
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

    def _base_claims(self, issuer: str, ttl: timedelta, now: datetime | None) -> dict[str, Any]:
        issued = int((now or datetime.now(timezone.utc)).timestamp())
        return {
            "iat": issued,
            "nbf": issued,
            "exp": issued + int(ttl.total_seconds()),
            "iss": issuer,
        }

    def issue_session_token(
        self, subject_id: str, subject_kind: SubjectKind | str, now: datetime | None = None
    ) -> str:
        """Sign a 24h session token binding an account id to its kind."""
        claims = self._base_claims(SESSION_ISSUER, self.session_ttl, now)
        claims.update({"id": subject_id, "type": SubjectKind(subject_kind).value})
        return self._encode(claims)

    def validate_session_token(self, token: str) -> SessionClaims:
        payload = self._decode(token, SESSION_ISSUER)
        subject_id = payload.get("id")
        if not isinstance(subject_id, str) or not subject_id:
            raise InvalidTokenError("missing subject")
        try:
            kind = SubjectKind(payload.get("type"))
        except ValueError as e:
            raise InvalidTokenError("unknown subject kind") from e
        return SessionClaims(
            subject_id=subject_id,
            subject_kind=kind,
            issued_at=_timestamp(payload["iat"]),
            expires_at=_timestamp(payload["exp"]),
            issuer=payload["iss"],
        )

    def issue_reset_token(
        self,
        email: str,
        subject_kind: SubjectKind | str,
        token_hash: str,
        now: datetime | None = None,
    ) -> str:
        """Sign a 15min reset token for one password change."""
        claims = self._base_claims(RESET_ISSUER, self.reset_ttl, now)
        claims.update(
            {
                "email": sanitize_email(email),
                "user_type": SubjectKind(subject_kind).value,
                "token_hash": token_hash,
            }
        )
        return self._encode(claims)

    def validate_reset_token(self, token: str) -> ResetClaims:
        payload = self._decode(token, RESET_ISSUER)
        if int(payload["exp"]) <= int(time.time()):
            raise ExpiredTokenError("reset token expired")
        email = payload.get("email")
        token_hash = payload.get("token_hash")
        if not isinstance(email, str) or not email or not isinstance(token_hash, str) or not token_hash:
            raise InvalidTokenError("incomplete reset claims")
        try:
            kind = SubjectKind(payload.get("user_type"))
        except ValueError as e:
            raise InvalidTokenError("unknown subject kind") from e
        return ResetClaims(
            email=email,
            subject_kind=kind,
            token_hash=token_hash,
            issued_at=_timestamp(payload["iat"]),
            expires_at=_timestamp(payload["exp"]),
        )


def get_token_service(request: Request) -> TokenService:
    """Return the process-wide TokenService built by the app lifespan."""
    service = getattr(request.app.state, "token_service", None)
    if service is None:
        raise ConfigurationError("Token service not initialized")
    return service


# ---------------------------------------------------------------------------
# Request authorization
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, stored on request.state.identity."""

    subject_id: str
    subject_kind: SubjectKind


_FORBIDDEN_DETAIL = {
    SubjectKind.COMPANY: "Access restricted to companies",
    SubjectKind.CANDIDATE: "Access restricted to candidates",
}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Authenticate the Bearer token. Raises 401 if absent or invalid."""
    auth = request.headers.get("Authorization")
    if not auth:
        raise _unauthorized("Missing authorization header")
    if len(auth.encode("utf-8")) > MAX_TOKEN_BYTES:
        raise _unauthorized("Authorization header too large")
    scheme, sep, token = auth.partition(" ")
    if scheme != "Bearer" or not sep:
        raise _unauthorized("Invalid authorization header format")
    token = token.strip()
    if not token:
        raise _unauthorized("Empty token")
    try:
        claims = tokens.validate_session_token(token)
    except InvalidTokenError as e:
        logger.debug("Rejected session token: %s", e)
        raise _unauthorized("Invalid or expired token")
    identity = Identity(subject_id=claims.subject_id, subject_kind=claims.subject_kind)
    request.state.identity = identity
    return identity


def authorize(required_kind: SubjectKind | None = None):
    """Build a dependency that authenticates and, optionally, requires a subject kind (403)."""

    async def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if required_kind is not None and identity.subject_kind != required_kind:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=_FORBIDDEN_DETAIL[required_kind],
            )
        return identity

    return dependency


require_company = authorize(SubjectKind.COMPANY)
require_candidate = authorize(SubjectKind.CANDIDATE)
