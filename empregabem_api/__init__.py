# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""EmpregaBem job board API."""

__version__ = "0.1.0"
