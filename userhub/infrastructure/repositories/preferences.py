# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userhub.domain.preferences.entities import Preference as DomainPreference
from userhub.domain.preferences.repositories import PreferenceRepository
from userhub.infrastructure.db.models import Preference
from userhub.infrastructure.unit_of_work import unit_of_work_scope
from userhub.shared.logging import logger


class SqlAlchemyPreferenceRepository(PreferenceRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_for_user(self, user_id: str) -> list[DomainPreference]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Preference)
                .filter(Preference.user_id == user_id)
                .order_by(Preference.key.asc())
                .all()
            )
            return [DomainPreference(user_id=r.user_id, key=r.key, value=r.value) for r in rows]

    def get(self, user_id: str, key: str) -> DomainPreference | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Preference, {"user_id": user_id, "key": key})
            if row is None:
                return None
            return DomainPreference(user_id=row.user_id, key=row.key, value=row.value)

    def upsert(self, preference: DomainPreference) -> DomainPreference:
        try:
            self._write(preference)
        except IntegrityError:
            # A concurrent insert of the same key won; the row exists now.
            logger.debug(f"preferences.upsert: retrying key={preference.key}")
            self._write(preference)
        return preference

    def _write(self, preference: DomainPreference) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Preference, {"user_id": preference.user_id, "key": preference.key})
            if row is None:
                session.add(
                    Preference(user_id=preference.user_id, key=preference.key, value=preference.value)
                )
            else:
                row.value = preference.value
            session.flush()

    def delete(self, user_id: str, key: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            deleted = (
                session.query(Preference)
                .filter(Preference.user_id == user_id, Preference.key == key)
                .delete(synchronize_session=False)
            )
            return deleted > 0


__all__ = ["SqlAlchemyPreferenceRepository"]
