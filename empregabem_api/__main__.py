# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Run the API server. Run: python -m empregabem_api"""

import logging

import uvicorn

from empregabem_api.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "empregabem_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
