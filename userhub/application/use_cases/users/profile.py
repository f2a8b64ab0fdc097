# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.domain.users.entities import User
from userhub.domain.users.exceptions import CurrentPasswordIncorrectError, UserNotFoundError
from userhub.domain.users.repositories import PasswordHasher, SessionRepository, UserRepository
from userhub.shared.logging import logger


class GetProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})
        return user


class UpdateProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, *, display_name: str) -> User:
        updated = self._users.update_profile(user_id, display_name=display_name.strip())
        if updated is None:
            raise UserNotFoundError(context={"user_id": user_id})
        return updated


class ChangePasswordUseCase:
    """Replace the password hash, then revoke every session the user holds.

    Revocation runs only after the new hash has been written, so a failed
    write leaves the old sessions usable.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher

    def execute(self, user_id: str, current_password: str, new_password: str) -> int:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})
        if not self._password_hasher.verify(current_password, user.password_hash):
            raise CurrentPasswordIncorrectError()

        if not self._users.update_password(user_id, self._password_hasher.hash(new_password)):
            raise UserNotFoundError(context={"user_id": user_id})
        revoked = self._sessions.delete_all_for_user(user_id)
        logger.info(f"auth.change_password: ok user_id={user_id} revoked_sessions={revoked}")
        return revoked


__all__ = ["ChangePasswordUseCase", "GetProfileUseCase", "UpdateProfileUseCase"]
