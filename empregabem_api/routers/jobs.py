# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Public job listing routes. No authentication required."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.database import get_db
from empregabem_api.models import Job
from empregabem_api.services.jobs import increment_views, search_jobs
from empregabem_api.api.params import require_object_id
from empregabem_api.api.schemas import JobResponse, Message

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=list[JobResponse])
async def list_jobs(
    location: str | None = Query(None, max_length=255),
    job_type: str | None = Query(None, max_length=64),
    level: str | None = Query(None, max_length=64),
    min_salary: float | None = Query(None, ge=0),
    db: AsyncSession = Depends(get_db),
) -> list[JobResponse]:
    """List active jobs, optionally filtered."""
    jobs = await search_jobs(db, location=location, job_type=job_type, level=level, min_salary=min_salary)
    return [JobResponse.model_validate(j) for j in jobs]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, db: AsyncSession = Depends(get_db)) -> JobResponse:
    job = await db.get(Job, require_object_id(job_id, "job ID"))
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return JobResponse.model_validate(job)


@router.post("/{job_id}/view", response_model=Message)
async def record_view(job_id: str, db: AsyncSession = Depends(get_db)) -> Message:
    """Count a job page view."""
    job_id = require_object_id(job_id, "job ID")
    if not await db.get(Job, job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    await increment_views(db, job_id)
    await db.commit()
    return Message(message="View recorded")
