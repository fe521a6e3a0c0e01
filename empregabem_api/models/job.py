# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Job posting model."""

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from empregabem_api.models.base import OBJECT_ID_LENGTH, Base, ObjectIdMixin
from empregabem_api.models.timestamp import TimestampMixin


class Job(Base, ObjectIdMixin, TimestampMixin):
    """Job posted by a company."""

    __tablename__ = "jobs"

    company_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Company display name, copied at creation
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    # remoto | presencial | híbrido
    job_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # junior | pleno | senior
    level: Mapped[str | None] = mapped_column(String(32), nullable=True)
    requirements: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    benefits: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    applicants: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # 0 normal, 1 featured
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
