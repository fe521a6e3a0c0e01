# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Candidate account model."""

from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from empregabem_api.models.base import Base, ObjectIdMixin
from empregabem_api.models.timestamp import TimestampMixin


class Candidate(Base, ObjectIdMixin, TimestampMixin):
    """Candidate account: browses jobs and applies."""

    __tablename__ = "candidates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    resume: Mapped[str | None] = mapped_column(Text, nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # [{"title", "company", "start_date", "end_date", "is_current", "description"}]
    experiences: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    linkedin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    github: Mapped[str | None] = mapped_column(String(255), nullable=True)
    portfolio: Mapped[str | None] = mapped_column(String(255), nullable=True)
