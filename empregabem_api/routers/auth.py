# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication API routes: registration, login and password reset."""

import logging
import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from empregabem_api.auth import (
    DUMMY_PASSWORD_HASH,
    SubjectKind,
    TokenService,
    WeakPasswordError,
    get_token_service,
    hash_password_async,
    sanitize_email,
    validate_password_strength,
    verify_password_async,
)
from empregabem_api.config import settings
from empregabem_api.database import get_db
from empregabem_api.models import Candidate, Company
from empregabem_api.rate_limit import rate_limit_auth_dep
from empregabem_api.services.accounts import email_owner, get_account_by_email
from empregabem_api.services.password_reset import (
    AccountNotFoundError,
    InvalidResetTokenError,
    complete_reset,
    request_reset,
)
from empregabem_api.api.schemas import (
    CandidateAuthResponse,
    CandidateCreate,
    CandidateResponse,
    CompanyAuthResponse,
    CompanyCreate,
    CompanyResponse,
    LoginRequest,
    Message,
    RequestResetRequest,
    RequestResetResponse,
    ResetPasswordRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"], dependencies=[Depends(rate_limit_auth_dep)])

RESET_REQUESTED_MESSAGE = "If this email exists, you will receive instructions to reset your password."
_CNPJ_RE = re.compile(r"^\d{14}$")


def _check_password(password: str) -> None:
    try:
        validate_password_strength(password)
    except WeakPasswordError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def _check_email_free(db: AsyncSession, email: str, kind: SubjectKind) -> None:
    owner = await email_owner(db, email)
    if owner is None:
        return
    if owner == kind:
        detail = "Email already registered"
    elif owner == SubjectKind.COMPANY:
        detail = "Email already registered as a company. Use another email."
    else:
        detail = "Email already registered as a candidate. Use another email."
    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


async def _authenticate(
    db: AsyncSession, kind: SubjectKind, data: LoginRequest
) -> Company | Candidate:
    account = await get_account_by_email(db, kind, data.email)
    if account is None:
        # Same bcrypt cost whether or not the account exists
        await verify_password_async(data.password, DUMMY_PASSWORD_HASH)
        matched = False
    else:
        matched = await verify_password_async(data.password, account.password_hash)
    if not matched:
        logger.info("Failed %s login", kind.value)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return account


@router.post("/company/register", response_model=CompanyAuthResponse, status_code=status.HTTP_201_CREATED)
async def register_company(
    data: CompanyCreate,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CompanyAuthResponse:
    """Create a company account and return a session token."""
    _check_password(data.password)
    email = sanitize_email(data.email)
    cnpj = data.cnpj.strip()
    if not _CNPJ_RE.match(cnpj):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CNPJ must contain exactly 14 digits",
        )
    await _check_email_free(db, email, SubjectKind.COMPANY)
    result = await db.execute(select(Company.id).where(Company.cnpj == cnpj))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="CNPJ already registered")

    company = Company(
        name=data.name,
        legal_name=data.legal_name,
        cnpj=cnpj,
        email=email,
        password_hash=await hash_password_async(data.password),
        phone=data.phone,
        location=data.location,
    )
    db.add(company)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email or CNPJ already registered")
    await db.refresh(company)
    logger.info("Company registered: %s", company.id)
    return CompanyAuthResponse(
        message="Company created successfully",
        token=tokens.issue_session_token(company.id, SubjectKind.COMPANY),
        company=CompanyResponse.model_validate(company),
    )


@router.post("/company/login", response_model=CompanyAuthResponse)
async def login_company(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CompanyAuthResponse:
    """Authenticate a company and return a session token."""
    company = await _authenticate(db, SubjectKind.COMPANY, data)
    return CompanyAuthResponse(
        token=tokens.issue_session_token(company.id, SubjectKind.COMPANY),
        company=CompanyResponse.model_validate(company),
    )


@router.post("/candidate/register", response_model=CandidateAuthResponse, status_code=status.HTTP_201_CREATED)
async def register_candidate(
    data: CandidateCreate,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CandidateAuthResponse:
    """Create a candidate account and return a session token."""
    _check_password(data.password)
    email = sanitize_email(data.email)
    await _check_email_free(db, email, SubjectKind.CANDIDATE)

    candidate = Candidate(
        name=data.name,
        email=email,
        password_hash=await hash_password_async(data.password),
        phone=data.phone,
        location=data.location,
    )
    db.add(candidate)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    await db.refresh(candidate)
    logger.info("Candidate registered: %s", candidate.id)
    return CandidateAuthResponse(
        message="Candidate created successfully",
        token=tokens.issue_session_token(candidate.id, SubjectKind.CANDIDATE),
        candidate=CandidateResponse.model_validate(candidate),
    )


@router.post("/candidate/login", response_model=CandidateAuthResponse)
async def login_candidate(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CandidateAuthResponse:
    """Authenticate a candidate and return a session token."""
    candidate = await _authenticate(db, SubjectKind.CANDIDATE, data)
    return CandidateAuthResponse(
        token=tokens.issue_session_token(candidate.id, SubjectKind.CANDIDATE),
        candidate=CandidateResponse.model_validate(candidate),
    )


@router.post(
    "/auth/request-reset",
    response_model=RequestResetResponse,
    response_model_exclude_none=True,
)
async def request_password_reset(
    data: RequestResetRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> RequestResetResponse:
    """Request a password reset. Answers the same whether or not the account exists."""
    result = await request_reset(db, tokens, data.email, data.user_type)
    response = RequestResetResponse(message=RESET_REQUESTED_MESSAGE)
    if settings.is_development and result.signed_token:
        response.dev_token = result.signed_token
    return response


@router.post("/auth/reset-password", response_model=Message)
async def reset_password(
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Message:
    """Set a new password using a reset token."""
    try:
        await complete_reset(db, tokens, data.token, data.new_password)
    except InvalidResetTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    except WeakPasswordError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AccountNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return Message(message="Password changed successfully. Sign in with your new password.")
