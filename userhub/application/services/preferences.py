# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-user key/value preferences. Callers only ever reach their own rows."""

from __future__ import annotations

from userhub.domain.preferences.entities import Preference, validate_key
from userhub.domain.preferences.exceptions import PreferenceNotFoundError
from userhub.domain.preferences.repositories import PreferenceRepository


class PreferenceService:
    def __init__(self, *, preferences: PreferenceRepository) -> None:
        self._preferences = preferences

    def list(self, user_id: str) -> dict[str, str]:
        return {pref.key: pref.value for pref in self._preferences.list_for_user(user_id)}

    def get(self, user_id: str, key: str) -> Preference:
        validate_key(key)
        pref = self._preferences.get(user_id, key)
        if pref is None:
            raise PreferenceNotFoundError(context={"key": key})
        return pref

    def set(self, user_id: str, key: str, value: object) -> Preference:
        # Preference() validates both key and value before anything is written
        return self._preferences.upsert(Preference(user_id=user_id, key=key, value=value))  # type: ignore[arg-type]

    def delete(self, user_id: str, key: str) -> None:
        validate_key(key)
        if not self._preferences.delete(user_id, key):
            raise PreferenceNotFoundError(context={"key": key})


__all__ = ["PreferenceService"]
