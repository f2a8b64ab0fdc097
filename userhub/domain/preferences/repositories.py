# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Preference


class PreferenceRepository(Protocol):
    def list_for_user(self, user_id: str) -> list[Preference]: ...
    def get(self, user_id: str, key: str) -> Preference | None: ...
    def upsert(self, preference: Preference) -> Preference: ...
    def delete(self, user_id: str, key: str) -> bool: ...
