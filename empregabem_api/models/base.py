# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Base model and object-id helpers."""

import os
import re
import time

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

OBJECT_ID_LENGTH = 24
_OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$")


def new_object_id() -> str:
    """Return a 24-char hex id: 4-byte big-endian timestamp followed by 8 random bytes."""
    return int(time.time()).to_bytes(4, "big").hex() + os.urandom(8).hex()


def is_object_id(value: str) -> bool:
    """True if value looks like an id produced by new_object_id()."""
    return bool(_OBJECT_ID_RE.match(value or ""))


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ObjectIdMixin:
    """Primary key as a 24-character hex object id."""

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH), primary_key=True, default=new_object_id
    )
