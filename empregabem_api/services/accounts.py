# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Account lookups shared by the auth routes and password reset."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.auth import SubjectKind, sanitize_email
from empregabem_api.models import Candidate, Company

ACCOUNT_MODELS: dict[SubjectKind, type[Company] | type[Candidate]] = {
    SubjectKind.COMPANY: Company,
    SubjectKind.CANDIDATE: Candidate,
}


def account_model(kind: SubjectKind | str) -> type[Company] | type[Candidate]:
    return ACCOUNT_MODELS[SubjectKind(kind)]


async def get_account_by_email(
    db: AsyncSession, kind: SubjectKind | str, email: str
) -> Company | Candidate | None:
    """Return the account of the given kind with this email, or None."""
    model = account_model(kind)
    result = await db.execute(select(model).where(model.email == sanitize_email(email)))
    return result.scalar_one_or_none()


async def email_owner(db: AsyncSession, email: str) -> SubjectKind | None:
    """Which account kind already uses this email (emails are unique across both kinds)."""
    for kind in SubjectKind:
        if await get_account_by_email(db, kind, email) is not None:
            return kind
    return None
