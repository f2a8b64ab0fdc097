# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.domain.users.entities import User
from userhub.domain.users.exceptions import UserNotFoundError
from userhub.domain.users.repositories import UserRepository
from userhub.shared.logging import logger


class SetUserActiveUseCase:
    """Toggle an account. Sessions stay in the registry; the middleware rejects them."""

    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, actor_id: str, user_id: str, active: bool) -> User:
        updated = self._users.set_active(user_id, active)
        if updated is None:
            raise UserNotFoundError(context={"user_id": user_id})
        logger.info(f"admin.set_active: user_id={user_id} active={active} actor={actor_id}")
        return updated


__all__ = ["SetUserActiveUseCase"]
