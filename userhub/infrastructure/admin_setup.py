# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.infrastructure.repositories.users import SqlAlchemyUserRepository
from userhub.shared.config import load_config
from userhub.shared.logging import logger


class AdminSetupError(Exception):
    pass


def setup_admin_users(users: SqlAlchemyUserRepository) -> int:
    """Grant the persisted admin flag to every existing account listed in ADMIN_EMAILS.

    Accounts registered later pick the flag up at registration time.
    """
    emails = frozenset(load_config().auth.admin_emails)
    if not emails:
        logger.info("admin_setup: no ADMIN_EMAILS configured, skipping")
        return 0
    try:
        granted = users.set_admin_by_emails(emails)
    except Exception as exc:
        logger.error(f"admin_setup: failed to grant admin flag: {type(exc).__name__}")
        raise AdminSetupError("failed to grant admin flag") from exc
    logger.info(f"admin_setup: ok configured={len(emails)} granted={granted}")
    return granted


__all__ = ["AdminSetupError", "setup_admin_users"]
