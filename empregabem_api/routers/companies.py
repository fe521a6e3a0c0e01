# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Company API routes: profile, job postings and applicant review."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.auth import Identity, require_company
from empregabem_api.database import get_db
from empregabem_api.models import APPLICATION_STATUSES, Application, Candidate, Company, Job
from empregabem_api.models.timestamp import utcnow
from empregabem_api.services.jobs import count_applicants
from empregabem_api.api.params import require_object_id
from empregabem_api.api.schemas import (
    Applicant,
    ApplicationResponse,
    ApplicationStatusUpdate,
    CandidateResponse,
    CompanyResponse,
    CompanyUpdate,
    JobApplicants,
    JobCreate,
    JobResponse,
    JobUpdate,
    Message,
)

router = APIRouter(prefix="/company", tags=["company"])


async def _get_company(db: AsyncSession, identity: Identity) -> Company:
    company = await db.get(Company, identity.subject_id)
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company


async def _get_owned_job(db: AsyncSession, job_id: str, identity: Identity) -> Job:
    job = await db.get(Job, require_object_id(job_id, "job ID"))
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.company_id != identity.subject_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to manage this job",
        )
    return job


@router.get("/me", response_model=CompanyResponse)
async def get_profile(
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    """Get current company profile."""
    return CompanyResponse.model_validate(await _get_company(db, identity))


@router.put("/me", response_model=CompanyResponse)
async def update_profile(
    data: CompanyUpdate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    """Update profile fields. Email, CNPJ and password are not changed here."""
    company = await _get_company(db, identity)
    for field, value in data.model_dump().items():
        setattr(company, field, value)
    await db.commit()
    await db.refresh(company)
    return CompanyResponse.model_validate(company)


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    """Post a new job. It starts active."""
    company = await _get_company(db, identity)
    job = Job(company_id=company.id, company=company.name, is_active=True, **data.model_dump())
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return JobResponse.model_validate(job)


@router.get("/jobs", response_model=list[JobResponse])
async def list_my_jobs(
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> list[JobResponse]:
    """List the company's jobs, active or not."""
    result = await db.execute(
        select(Job).where(Job.company_id == identity.subject_id).order_by(Job.created_at.desc())
    )
    return [JobResponse.model_validate(j) for j in result.scalars().all()]


@router.put("/jobs/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    data: JobUpdate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    """Replace a job's editable fields."""
    job = await _get_owned_job(db, job_id, identity)
    for field, value in data.model_dump().items():
        setattr(job, field, value)
    await db.commit()
    await db.refresh(job)
    return JobResponse.model_validate(job)


@router.delete("/jobs/{job_id}", response_model=Message)
async def delete_job(
    job_id: str,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> Message:
    """Delete a job and its applications."""
    job = await _get_owned_job(db, job_id, identity)
    await db.execute(delete(Application).where(Application.job_id == job.id))
    await db.delete(job)
    await db.commit()
    return Message(message="Job deleted")


async def _set_active(db: AsyncSession, job_id: str, identity: Identity, active: bool) -> JobResponse:
    job = await _get_owned_job(db, job_id, identity)
    job.is_active = active
    await db.commit()
    await db.refresh(job)
    return JobResponse.model_validate(job)


@router.patch("/jobs/{job_id}/activate", response_model=JobResponse)
async def activate_job(
    job_id: str,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    return await _set_active(db, job_id, identity, True)


@router.patch("/jobs/{job_id}/deactivate", response_model=JobResponse)
async def deactivate_job(
    job_id: str,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    return await _set_active(db, job_id, identity, False)


@router.get("/jobs/{job_id}/applicants", response_model=JobApplicants)
async def list_applicants(
    job_id: str,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> JobApplicants:
    """List applications to one of the company's jobs, with candidate profiles."""
    job = await _get_owned_job(db, job_id, identity)
    result = await db.execute(
        select(Application, Candidate)
        .join(Candidate, Application.candidate_id == Candidate.id)
        .where(Application.job_id == job.id)
        .order_by(Application.applied_at)
    )
    rows = result.all()
    # Keep the denormalized counter in line with the real number of applications
    real_count = await count_applicants(db, job.id)
    if job.applicants != real_count:
        job.applicants = real_count
        await db.commit()
        await db.refresh(job)
    return JobApplicants(
        job=JobResponse.model_validate(job),
        applicants=[
            Applicant(
                application=ApplicationResponse.model_validate(app),
                candidate=CandidateResponse.model_validate(candidate),
            )
            for app, candidate in rows
        ],
    )


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Move an application to a new status. Only the company that owns the job may do this."""
    if data.status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status")
    application = await db.get(Application, require_object_id(application_id, "application ID"))
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    if application.company_id != identity.subject_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to update this application",
        )
    application.status = data.status
    if data.status == "viewed" and application.viewed_at is None:
        application.viewed_at = utcnow()
    await db.commit()
    await db.refresh(application)
    return ApplicationResponse.model_validate(application)
