# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid

from userhub.domain.users.entities import User, default_display_name
from userhub.domain.users.exceptions import UserAlreadyExistsError
from userhub.domain.users.repositories import PasswordHasher, UserRepository
from userhub.shared.logging import logger
from userhub.shared.utils.clock import utc_now


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        admin_emails: frozenset[str] = frozenset(),
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._admin_emails = admin_emails

    def execute(self, email: str, password: str, display_name: str | None = None) -> User:
        email = email.strip().lower()
        if self._users.find_by_email(email) is not None:
            raise UserAlreadyExistsError()
        now = utc_now()
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=self._password_hasher.hash(password),
            display_name=(display_name or "").strip() or default_display_name(email),
            is_active=True,
            is_admin=email in self._admin_emails,
            created_at=now,
            updated_at=now,
        )
        # The repository raises UserAlreadyExistsError if a concurrent insert won.
        persisted = self._users.add(user)
        logger.info(f"auth.register: ok user_id={persisted.id}")
        return persisted


__all__ = ["RegisterUserUseCase"]
