# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Session, User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update_profile(self, user_id: str, *, display_name: str) -> User | None: ...
    def update_password(self, user_id: str, password_hash: str) -> bool: ...
    def touch_last_login(self, user_id: str) -> None: ...
    def set_active(self, user_id: str, active: bool) -> User | None: ...
    def list(self, *, limit: int, offset: int) -> list[User]: ...


class SessionRepository(Protocol):
    def create(self, user_id: str, token: str, expires_at: datetime) -> Session: ...
    def find_active_by_token(self, token: str) -> Session | None: ...
    def delete_by_token(self, token: str) -> None: ...
    def delete_all_for_user(self, user_id: str) -> int: ...
    def purge_expired(self) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
