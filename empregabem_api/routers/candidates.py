# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Candidate API routes: profile, applications and saved jobs."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.auth import Identity, require_candidate
from empregabem_api.database import get_db
from empregabem_api.models import Application, Candidate, Job, SavedJob
from empregabem_api.services.jobs import adjust_applicants
from empregabem_api.api.params import require_object_id
from empregabem_api.api.schemas import (
    ApplicationResponse,
    ApplyRequest,
    CandidateResponse,
    CandidateUpdate,
    JobResponse,
    Message,
    SavedJobResponse,
    SaveJobRequest,
)

router = APIRouter(prefix="/candidate", tags=["candidate"])


async def _get_candidate(db: AsyncSession, identity: Identity) -> Candidate:
    candidate = await db.get(Candidate, identity.subject_id)
    if not candidate:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Candidate not found")
    return candidate


@router.get("/me", response_model=CandidateResponse)
async def get_profile(
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> CandidateResponse:
    """Get current candidate profile."""
    return CandidateResponse.model_validate(await _get_candidate(db, identity))


@router.put("/me", response_model=CandidateResponse)
async def update_profile(
    data: CandidateUpdate,
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> CandidateResponse:
    """Update profile fields. Email and password are not changed here."""
    candidate = await _get_candidate(db, identity)
    for field, value in data.model_dump().items():
        setattr(candidate, field, value)
    await db.commit()
    await db.refresh(candidate)
    return CandidateResponse.model_validate(candidate)


@router.post("/applications", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply(
    data: ApplyRequest,
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Apply to an active job. One application per job."""
    job = await db.get(Job, require_object_id(data.job_id, "job ID"))
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if not job.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This job is no longer active")
    existing = await db.execute(
        select(Application.id).where(
            Application.job_id == job.id,
            Application.candidate_id == identity.subject_id,
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already applied to this job")

    application = Application(
        candidate_id=identity.subject_id,
        job_id=job.id,
        company_id=job.company_id,
        status="pending",
        message=data.message,
    )
    db.add(application)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already applied to this job")
    await adjust_applicants(db, job.id, 1)
    await db.commit()
    await db.refresh(application)
    return ApplicationResponse.model_validate(application)


@router.get("/applications", response_model=list[ApplicationResponse])
async def list_my_applications(
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> list[ApplicationResponse]:
    result = await db.execute(
        select(Application)
        .where(Application.candidate_id == identity.subject_id)
        .order_by(Application.applied_at.desc())
    )
    return [ApplicationResponse.model_validate(a) for a in result.scalars().all()]


@router.delete("/applications/{application_id}", response_model=Message)
async def cancel_application(
    application_id: str,
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> Message:
    """Withdraw an application. Only possible while the company has not touched it."""
    application = await db.get(Application, require_object_id(application_id, "application ID"))
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    if application.candidate_id != identity.subject_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot cancel this application",
        )
    if application.status != "pending":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot cancel an application whose status was changed by the company",
        )
    job_id = application.job_id
    await db.delete(application)
    await adjust_applicants(db, job_id, -1)
    await db.commit()
    return Message(message="Application cancelled")


@router.post("/saved-jobs", response_model=Message, status_code=status.HTTP_201_CREATED)
async def save_job(
    data: SaveJobRequest,
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> Message:
    """Bookmark a job."""
    job_id = require_object_id(data.job_id, "job ID")
    if not await db.get(Job, job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    existing = await db.execute(
        select(SavedJob.id).where(SavedJob.candidate_id == identity.subject_id, SavedJob.job_id == job_id)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Job already saved")
    db.add(SavedJob(candidate_id=identity.subject_id, job_id=job_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Job already saved")
    return Message(message="Job saved")


@router.get("/saved-jobs", response_model=list[SavedJobResponse])
async def list_saved_jobs(
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> list[SavedJobResponse]:
    """Saved jobs with full job details. Jobs deleted since are skipped."""
    result = await db.execute(
        select(SavedJob, Job)
        .join(Job, SavedJob.job_id == Job.id)
        .where(SavedJob.candidate_id == identity.subject_id)
        .order_by(SavedJob.saved_at.desc())
    )
    return [
        SavedJobResponse(job=JobResponse.model_validate(job), saved_at=saved.saved_at)
        for saved, job in result.all()
    ]


@router.delete("/saved-jobs/{job_id}", response_model=Message)
async def unsave_job(
    job_id: str,
    identity: Identity = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
) -> Message:
    job_id = require_object_id(job_id, "job ID")
    result = await db.execute(
        delete(SavedJob).where(SavedJob.candidate_id == identity.subject_id, SavedJob.job_id == job_id)
    )
    if not result.rowcount:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job is not saved")
    await db.commit()
    return Message(message="Job removed from saved jobs")
