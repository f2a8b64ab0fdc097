# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.domain.users.repositories import SessionRepository
from userhub.shared.logging import logger


class PurgeExpiredSessionsUseCase:
    def __init__(self, *, sessions: SessionRepository) -> None:
        self._sessions = sessions

    def execute(self) -> int:
        removed = self._sessions.purge_expired()
        logger.info(f"sessions.purge: removed={removed}")
        return removed


__all__ = ["PurgeExpiredSessionsUseCase"]
