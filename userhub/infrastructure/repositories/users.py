# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userhub.domain.users.entities import Session as DomainSession
from userhub.domain.users.entities import User as DomainUser
from userhub.domain.users.exceptions import UserAlreadyExistsError
from userhub.domain.users.repositories import SessionRepository, UserRepository
from userhub.infrastructure.db.models import Session as SessionRow
from userhub.infrastructure.db.models import User
from userhub.infrastructure.unit_of_work import unit_of_work_scope
from userhub.shared.utils.clock import as_utc, as_utc_or_none, utc_now


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        display_name=row.display_name,
        is_active=bool(row.is_active),
        is_admin=bool(row.is_admin),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        last_login=as_utc_or_none(row.last_login),
    )


def _to_domain_session(row: SessionRow) -> DomainSession:
    return DomainSession(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=as_utc(row.expires_at),
        created_at=as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email.lower()).first()
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain_user(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    id=user.id,
                    email=user.email.lower(),
                    password_hash=user.password_hash,
                    display_name=user.display_name,
                    is_active=user.is_active,
                    is_admin=user.is_admin,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
                session.add(row)
                session.flush()
                return _to_domain_user(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc

    def update_profile(self, user_id: str, *, display_name: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                return None
            row.display_name = display_name
            row.updated_at = utc_now()
            session.flush()
            return _to_domain_user(row)

    def update_password(self, user_id: str, password_hash: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                return False
            row.password_hash = password_hash
            row.updated_at = utc_now()
            return True

    def touch_last_login(self, user_id: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(User).filter(User.id == user_id).update(
                {User.last_login: utc_now()}, synchronize_session=False
            )

    def set_active(self, user_id: str, active: bool) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                return None
            row.is_active = active
            row.updated_at = utc_now()
            session.flush()
            return _to_domain_user(row)

    def set_admin_by_emails(self, emails: frozenset[str]) -> int:
        """Grant the global admin flag to every existing account in ``emails``."""
        if not emails:
            return 0
        with unit_of_work_scope(self._session_factory) as session:
            return (
                session.query(User)
                .filter(User.email.in_(sorted(emails)), User.is_admin.is_(False))
                .update({User.is_admin: True}, synchronize_session=False)
            )

    def list(self, *, limit: int, offset: int) -> list[DomainUser]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(User)
                .order_by(User.created_at.asc(), User.id.asc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_to_domain_user(row) for row in rows]


class SqlAlchemySessionRepository(SessionRepository):
    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def create(self, user_id: str, token: str, expires_at: datetime) -> DomainSession:
        with unit_of_work_scope(self._session_factory) as session:
            row = SessionRow(user_id=user_id, token=token, expires_at=expires_at, created_at=self._clock())
            session.add(row)
            session.flush()
            return _to_domain_session(row)

    def find_active_by_token(self, token: str) -> DomainSession | None:
        """Return the live session for ``token``; an expired match is deleted on the spot."""
        now = self._clock()
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(SessionRow).filter(SessionRow.token == token).first()
            if row is None:
                return None
            found = _to_domain_session(row)
            if found.is_active(now):
                return found
            session.delete(row)
        return None

    def delete_by_token(self, token: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(SessionRow).filter(SessionRow.token == token).delete(
                synchronize_session=False
            )

    def delete_all_for_user(self, user_id: str) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            return (
                session.query(SessionRow)
                .filter(SessionRow.user_id == user_id)
                .delete(synchronize_session=False)
            )

    def purge_expired(self) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            return (
                session.query(SessionRow)
                .filter(SessionRow.expires_at <= self._clock())
                .delete(synchronize_session=False)
            )


__all__ = ["SqlAlchemySessionRepository", "SqlAlchemyUserRepository"]
