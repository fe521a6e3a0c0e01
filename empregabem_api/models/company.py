# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Company account model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from empregabem_api.models.base import Base, ObjectIdMixin
from empregabem_api.models.timestamp import TimestampMixin


class Company(Base, ObjectIdMixin, TimestampMixin):
    """Company account: posts jobs and reviews applications."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    cnpj: Mapped[str] = mapped_column(String(14), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo: Mapped[str | None] = mapped_column(String(512), nullable=True)
    about: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "1-10", "11-50", "51-200", "201-500", "500+"
    employee_count: Mapped[str | None] = mapped_column(String(16), nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    sector: Mapped[str | None] = mapped_column(String(128), nullable=True)
    # "pending", "verified", "rejected"
    verification_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
