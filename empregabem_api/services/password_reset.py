# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Password reset: issue, redeem and expire reset tokens.

Two artifacts are produced per request: a random token (32 bytes, hex) and a
signed reset JWT that embeds the SHA-256 of the random token. Only the JWT is
handed back to the user; only the hash is stored and looked up. Redemption
marks the record used with a conditional UPDATE so that two concurrent
redemptions of the same token cannot both succeed.

Requests for unknown accounts skip the INSERT and commit, so their latency is
slightly lower than for existing accounts. The response body never differs.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.auth import (
    InvalidTokenError,
    SubjectKind,
    TokenService,
    hash_password_async,
    sanitize_email,
    validate_password_strength,
)
from empregabem_api.models import Candidate, Company, PasswordReset
from empregabem_api.models.timestamp import utcnow
from empregabem_api.services.accounts import get_account_by_email

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32


class InvalidResetTokenError(Exception):
    """Reset token is invalid, expired or already used."""


class AccountNotFoundError(Exception):
    """The account a valid reset token points to no longer exists."""


@dataclass(frozen=True)
class ResetRequestResult:
    # Signed reset token; None when nothing was stored (unknown account or store failure)
    signed_token: str | None


def hash_reset_token(raw_token: str) -> str:
    """Lookup key for a delivered reset token."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


async def request_reset(
    db: AsyncSession,
    tokens: TokenService,
    email: str,
    subject_kind: SubjectKind | str,
) -> ResetRequestResult:
    """Issue a reset token if the account exists.

    The caller must answer identically whatever this returns. Token material
    is generated before the lookup so the work done does not depend on
    whether the account exists, and store failures are logged, not raised.
    """
    email = sanitize_email(email)
    kind = SubjectKind(subject_kind)
    now = utcnow()
    raw_token = secrets.token_hex(RESET_TOKEN_BYTES)
    token_hash = hash_reset_token(raw_token)
    signed = tokens.issue_reset_token(email, kind, token_hash, now=now)

    try:
        account = await get_account_by_email(db, kind, email)
        if account is None:
            logger.info("Password reset requested for unknown %s account", kind.value)
            return ResetRequestResult(signed_token=None)
        db.add(
            PasswordReset(
                email=email,
                user_type=kind.value,
                token=signed,
                token_hash=token_hash,
                created_at=now,
                expires_at=now + tokens.reset_ttl,
            )
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to store password reset for %s account", kind.value)
        return ResetRequestResult(signed_token=None)

    logger.info("Password reset issued for %s %s", kind.value, account.id)
    return ResetRequestResult(signed_token=signed)


async def complete_reset(
    db: AsyncSession,
    tokens: TokenService,
    signed_token: str,
    new_password: str,
) -> Company | Candidate:
    """Redeem a reset token and set a new password.

    Raises InvalidResetTokenError, WeakPasswordError or AccountNotFoundError.
    On success the redeemed record and every other unused record for the
    same (email, user_type) are marked used.
    """
    try:
        claims = tokens.validate_reset_token(signed_token)
    except InvalidTokenError as e:
        raise InvalidResetTokenError() from e

    validate_password_strength(new_password)

    now = utcnow()
    result = await db.execute(
        select(PasswordReset).where(
            PasswordReset.token_hash == claims.token_hash,
            PasswordReset.used.is_(False),
            PasswordReset.expires_at > now,
        )
    )
    record = result.scalar_one_or_none()
    if (
        record is None
        or record.email != claims.email
        or record.user_type != claims.subject_kind.value
    ):
        raise InvalidResetTokenError()

    account = await get_account_by_email(db, claims.subject_kind, claims.email)
    if account is None:
        raise AccountNotFoundError()

    password_hash = await hash_password_async(new_password)

    claimed = await db.execute(
        update(PasswordReset)
        .where(
            PasswordReset.id == record.id,
            PasswordReset.used.is_(False),
            PasswordReset.expires_at > now,
        )
        .values(used=True, used_at=now)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        # Lost a race with a concurrent redemption
        await db.rollback()
        raise InvalidResetTokenError()

    account.password_hash = password_hash
    await db.execute(
        update(PasswordReset)
        .where(
            PasswordReset.email == claims.email,
            PasswordReset.user_type == claims.subject_kind.value,
            PasswordReset.used.is_(False),
        )
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info("Password reset completed for %s %s", claims.subject_kind.value, account.id)
    return account


async def purge_expired(db: AsyncSession) -> int:
    """Delete reset records past their expiry. Returns the number removed."""
    result = await db.execute(
        delete(PasswordReset)
        .where(PasswordReset.expires_at < utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount or 0
