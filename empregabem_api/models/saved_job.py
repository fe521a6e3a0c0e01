# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Saved (bookmarked) job model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from empregabem_api.models.base import OBJECT_ID_LENGTH, Base, ObjectIdMixin
from empregabem_api.models.timestamp import utcnow


class SavedJob(Base, ObjectIdMixin):
    """Job bookmarked by a candidate."""

    __tablename__ = "saved_jobs"
    __table_args__ = (UniqueConstraint("candidate_id", "job_id", name="uq_saved_jobs_candidate_job"),)

    candidate_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_id: Mapped[str] = mapped_column(String(OBJECT_ID_LENGTH), nullable=False)
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
