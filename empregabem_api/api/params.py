# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Path/body parameter checks shared by routers."""

from fastapi import HTTPException, status

from empregabem_api.models import is_object_id


def require_object_id(value: str, label: str = "ID") -> str:
    """Return value if it is a 24-char hex object id, else raise 400."""
    value = (value or "").strip().lower()
    if not is_object_id(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label}")
    return value
