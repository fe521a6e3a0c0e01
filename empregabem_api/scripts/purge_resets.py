#!/usr/bin/env python3
# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Delete expired password reset records. Run: python -m empregabem_api.scripts.purge_resets"""

import asyncio
import logging

from empregabem_api.config import settings
from empregabem_api.database import async_session_maker, init_db
from empregabem_api.services.password_reset import purge_expired


async def main():
    await init_db()
    async with async_session_maker() as session:
        removed = await purge_expired(session)
    print(f"Removed {removed} expired reset record(s).")


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    asyncio.run(main())
