# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Password reset record model."""

from datetime import datetime
from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from empregabem_api.models.base import Base, ObjectIdMixin
from empregabem_api.models.timestamp import utcnow


class PasswordReset(Base, ObjectIdMixin):
    """Server-side state of one reset token.

    The store only ever sees ``token_hash`` (SHA-256 of the random token
    delivered to the user), never the random token itself. A record is
    marked used exactly once and is removed only by expiry cleanup.
    """

    __tablename__ = "password_resets"
    __table_args__ = (Index("ix_password_resets_identity", "email", "user_type", "used"),)

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type: Mapped[str] = mapped_column(String(16), nullable=False)
    token: Mapped[str] = mapped_column(Text, nullable=False)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
