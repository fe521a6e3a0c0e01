# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic schemas for API request/response."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from empregabem_api.auth import SubjectKind


class Message(BaseModel):
    message: str


# Auth
class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(max_length=255)


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    legal_name: str = Field(default="", max_length=255)
    cnpj: str
    email: EmailStr
    password: str = Field(min_length=1, max_length=255)
    phone: str = Field(default="", max_length=32)
    location: str = Field(default="", max_length=255)


class CandidateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=1, max_length=255)
    phone: str = Field(default="", max_length=32)
    location: str = Field(default="", max_length=255)


class RequestResetRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    user_type: SubjectKind


class RequestResetResponse(BaseModel):
    message: str
    # Development only: the signed reset token that would be delivered out of band
    dev_token: str | None = None


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=1, max_length=255)


# Accounts
class CompanyResponse(BaseModel):
    id: str
    name: str
    legal_name: str
    cnpj: str
    email: str
    phone: str
    website: str | None = None
    logo: str | None = None
    about: str | None = None
    employee_count: str | None = None
    location: str
    sector: str | None = None
    verification_status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CompanyUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    legal_name: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=32)
    website: str | None = None
    logo: str | None = None
    about: str | None = None
    employee_count: str | None = None
    location: str = Field(default="", max_length=255)
    sector: str | None = None


class Experience(BaseModel):
    title: str
    company: str
    start_date: str
    end_date: str | None = None
    is_current: bool = False
    description: str | None = None


class CandidateResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    location: str
    resume: str | None = None
    skills: list[str] = []
    experiences: list[Experience] = []
    linkedin: str | None = None
    github: str | None = None
    portfolio: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CandidateUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(default="", max_length=32)
    location: str = Field(default="", max_length=255)
    resume: str | None = None
    skills: list[str] = []
    experiences: list[Experience] = []
    linkedin: str | None = None
    github: str | None = None
    portfolio: str | None = None


class CompanyAuthResponse(BaseModel):
    message: str | None = None
    token: str
    company: CompanyResponse


class CandidateAuthResponse(BaseModel):
    message: str | None = None
    token: str
    candidate: CandidateResponse


# Jobs
class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=255)
    salary: float | None = Field(default=None, ge=0)
    job_type: str | None = None
    level: str | None = None
    requirements: list[str] = []
    benefits: list[str] = []
    priority: int = 0


class JobUpdate(JobCreate):
    is_active: bool = True


class JobResponse(BaseModel):
    id: str
    company_id: str
    title: str
    description: str
    company: str
    location: str
    salary: float | None = None
    job_type: str | None = None
    level: str | None = None
    requirements: list[str] = []
    benefits: list[str] = []
    is_active: bool
    views: int
    applicants: int
    priority: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Applications
class ApplyRequest(BaseModel):
    job_id: str
    message: str | None = Field(default=None, max_length=5000)


class ApplicationResponse(BaseModel):
    id: str
    candidate_id: str
    job_id: str
    company_id: str
    status: str
    message: str | None = None
    applied_at: datetime
    viewed_at: datetime | None = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApplicationStatusUpdate(BaseModel):
    status: str


class Applicant(BaseModel):
    application: ApplicationResponse
    candidate: CandidateResponse


class JobApplicants(BaseModel):
    job: JobResponse
    applicants: list[Applicant]


# Saved jobs
class SaveJobRequest(BaseModel):
    job_id: str


class SavedJobResponse(BaseModel):
    job: JobResponse
    saved_at: datetime
