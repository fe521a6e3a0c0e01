# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Job queries and counter updates."""

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.models import Application, Job


async def search_jobs(
    db: AsyncSession,
    location: str | None = None,
    job_type: str | None = None,
    level: str | None = None,
    min_salary: float | None = None,
    active_only: bool = True,
) -> list[Job]:
    """List jobs, newest and featured first. Location is a substring match; type and level are exact."""
    query = select(Job)
    if active_only:
        query = query.where(Job.is_active.is_(True))
    if location:
        query = query.where(Job.location.icontains(location.strip(), autoescape=True))
    if job_type:
        query = query.where(func.lower(Job.job_type) == job_type.strip().lower())
    if level:
        query = query.where(func.lower(Job.level) == level.strip().lower())
    if min_salary is not None and min_salary > 0:
        query = query.where(Job.salary >= min_salary)
    result = await db.execute(query.order_by(Job.priority.desc(), Job.created_at.desc()))
    return list(result.scalars().all())


async def increment_views(db: AsyncSession, job_id: str) -> None:
    await db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values(views=Job.views + 1)
        .execution_options(synchronize_session=False)
    )


async def adjust_applicants(db: AsyncSession, job_id: str, delta: int) -> None:
    await db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values(applicants=case((Job.applicants + delta > 0, Job.applicants + delta), else_=0))
        .execution_options(synchronize_session=False)
    )


async def count_applicants(db: AsyncSession, job_id: str) -> int:
    result = await db.scalar(
        select(func.count()).select_from(Application).where(Application.job_id == job_id)
    )
    return result or 0
