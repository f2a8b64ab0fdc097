# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Delete expired sessions from the registry.

Intended for cron:

    python -m userhub.scripts.purge_sessions
"""

from __future__ import annotations

import argparse

from userhub.application.use_cases.admin.purge_sessions import PurgeExpiredSessionsUseCase
from userhub.infrastructure.db import SessionLocal, init_db
from userhub.infrastructure.repositories.users import SqlAlchemySessionRepository
from userhub.shared.logging import setup_logging


def purge() -> int:
    sessions = SqlAlchemySessionRepository(SessionLocal)
    return PurgeExpiredSessionsUseCase(sessions=sessions).execute()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Purge expired login sessions")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the log level (DEBUG, INFO, ...)",
    )
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    init_db()
    removed = purge()
    print(f"Removed {removed} expired session(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
