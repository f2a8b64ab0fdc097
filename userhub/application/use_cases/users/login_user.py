# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from userhub.application.services.tokens import JwtTokenService
from userhub.domain.users.entities import User
from userhub.domain.users.exceptions import AccountDeactivatedError, InvalidCredentialsError
from userhub.domain.users.repositories import PasswordHasher, SessionRepository, UserRepository
from userhub.shared.logging import logger


@dataclass(slots=True, frozen=True)
class LoginResult:
    token: str
    user: User


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
        tokens: JwtTokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._dummy_hash: str | None = None

    def execute(self, email: str, password: str) -> LoginResult:
        email = email.strip().lower()
        user = self._users.find_by_email(email)
        if user is None:
            # Keep the unknown-email path as slow as a real verification.
            self._password_hasher.verify(password, self._placeholder_hash())
            logger.info("auth.login: rejected unknown email")
            raise InvalidCredentialsError()
        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: rejected bad password user_id={user.id}")
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.info(f"auth.login: rejected deactivated user_id={user.id}")
            raise AccountDeactivatedError(status=InvalidCredentialsError.status)

        issued = self._tokens.issue(user.id, user.email)
        self._sessions.create(user.id, issued.token, issued.claims.expires_at)
        self._users.touch_last_login(user.id)
        logger.info(f"auth.login: ok user_id={user.id}")
        return LoginResult(token=issued.token, user=user)

    def _placeholder_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash("placeholder-password")
        return self._dummy_hash


__all__ = ["LoginResult", "LoginUserUseCase"]
