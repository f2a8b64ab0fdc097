"""Use-case for ending a session."""

from __future__ import annotations

from userhub.application.services.authenticator import extract_bearer_token
from userhub.domain.users.repositories import SessionRepository


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionRepository) -> None:
        self._sessions = sessions

    def execute(self, authorization: str | None) -> None:
        # Logout always succeeds; unknown or missing tokens are a no-op.
        token = extract_bearer_token(authorization)
        if token:
            self._sessions.delete_by_token(token)
