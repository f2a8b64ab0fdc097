# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, time-bound bearer tokens.

A token is an HS256 JWT carrying the user id (``sub``), the email, the issue
and expiry instants and a random ``jti``. Verification is purely local: it
checks the signature and the embedded expiry and never touches the store.
Revocation is the session registry's job.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from userhub.domain.users.exceptions import InvalidTokenError, TokenExpiredError
from userhub.shared.utils.clock import utc_now


@dataclass(slots=True, frozen=True)
class TokenClaims:
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class IssuedToken:
    token: str
    claims: TokenClaims


class JwtTokenService:
    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: str, email: str) -> IssuedToken:
        # JWT timestamps have second resolution
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(
            token=token,
            claims=TokenClaims(
                user_id=str(user_id),
                email=email,
                issued_at=issued_at,
                expires_at=expires_at,
            ),
        )

    def verify(self, token: str) -> TokenClaims:
        try:
            data = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        email = data.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidTokenError()

        return TokenClaims(
            user_id=str(data["sub"]),
            email=email,
            issued_at=datetime.fromtimestamp(data["iat"], UTC),
            expires_at=datetime.fromtimestamp(data["exp"], UTC),
        )


__all__ = ["IssuedToken", "JwtTokenService", "TokenClaims"]
