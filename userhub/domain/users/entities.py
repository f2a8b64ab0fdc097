# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: str
    email: str
    password_hash: str
    display_name: str
    is_active: bool
    is_admin: bool
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None


@dataclass(slots=True, frozen=True)
class Session:

    id: str
    user_id: str
    token: str
    expires_at: datetime
    created_at: datetime

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now


@dataclass(slots=True, frozen=True)
class AuthContext:
    """Identity attached to a request once every authentication step passed."""

    user_id: str
    email: str
    session_id: str
    is_admin: bool = False


def default_display_name(email: str) -> str:
    return email.split("@", 1)[0]
