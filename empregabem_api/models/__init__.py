# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database models."""

from empregabem_api.models.base import Base, is_object_id, new_object_id
from empregabem_api.models.company import Company
from empregabem_api.models.candidate import Candidate
from empregabem_api.models.job import Job
from empregabem_api.models.application import APPLICATION_STATUSES, Application
from empregabem_api.models.saved_job import SavedJob
from empregabem_api.models.password_reset import PasswordReset

__all__ = [
    "Base",
    "is_object_id",
    "new_object_id",
    "Company",
    "Candidate",
    "Job",
    "Application",
    "APPLICATION_STATUSES",
    "SavedJob",
    "PasswordReset",
]
