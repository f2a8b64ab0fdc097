# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request authentication: bearer extraction, signature check, session check, account check."""

from __future__ import annotations

from userhub.application.services.tokens import JwtTokenService
from userhub.domain.users.entities import AuthContext
from userhub.domain.users.exceptions import (
    AccountDeactivatedError,
    MissingTokenError,
    SessionExpiredError,
)
from userhub.domain.users.repositories import SessionRepository, UserRepository
from userhub.shared.logging import logger

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    if authorization[: len(BEARER_PREFIX)].lower() != BEARER_PREFIX:
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class Authenticator:
    def __init__(
        self,
        *,
        tokens: JwtTokenService,
        sessions: SessionRepository,
        users: UserRepository,
    ) -> None:
        self._tokens = tokens
        self._sessions = sessions
        self._users = users

    def authenticate(self, authorization: str | None) -> AuthContext:
        token = extract_bearer_token(authorization)
        if token is None:
            raise MissingTokenError()

        # Stateless check first; raises InvalidTokenError / TokenExpiredError.
        claims = self._tokens.verify(token)

        session = self._sessions.find_active_by_token(token)
        if session is None or session.user_id != claims.user_id:
            logger.info(f"auth: session missing or expired user_id={claims.user_id}")
            raise SessionExpiredError()

        user = self._users.find_by_id(session.user_id)
        if user is None:
            logger.warning(f"auth: session {session.id} points at a missing user")
            raise SessionExpiredError()
        if not user.is_active:
            logger.info(f"auth: rejected deactivated user_id={user.id}")
            raise AccountDeactivatedError()

        return AuthContext(
            user_id=user.id,
            email=claims.email,
            session_id=session.id,
            is_admin=user.is_admin,
        )


__all__ = ["Authenticator", "extract_bearer_token"]
