# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from userhub.domain.groups.entities import Group as DomainGroup
from userhub.domain.groups.entities import GroupMember, GroupMembership as DomainMembership
from userhub.domain.groups.entities import GroupRole, UserGroup
from userhub.domain.groups.exceptions import MembershipAlreadyExistsError
from userhub.domain.groups.repositories import GroupRepository
from userhub.infrastructure.db.models import Group, GroupMembership, User
from userhub.infrastructure.unit_of_work import unit_of_work_scope
from userhub.shared.utils.clock import as_utc, utc_now


def _to_domain_group(row: Group) -> DomainGroup:
    return DomainGroup(
        id=row.id,
        name=row.name,
        description=row.description,
        created_by=row.created_by,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        creator_name=row.creator.display_name if row.creator is not None else None,
    )


def _to_domain_membership(row: GroupMembership) -> DomainMembership:
    return DomainMembership(
        user_id=row.user_id,
        group_id=row.group_id,
        role=GroupRole(row.role),
        joined_at=as_utc(row.joined_at),
    )


class SqlAlchemyGroupRepository(GroupRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_id(self, group_id: str) -> DomainGroup | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Group)
                .options(joinedload(Group.creator))
                .filter(Group.id == group_id)
                .first()
            )
            return _to_domain_group(row) if row else None

    def list(self, *, limit: int, offset: int) -> list[DomainGroup]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Group)
                .options(joinedload(Group.creator))
                .order_by(Group.created_at.desc(), Group.id.asc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_to_domain_group(row) for row in rows]

    def create_with_admin(
        self, *, name: str, description: str | None, creator_id: str
    ) -> DomainGroup:
        # Validate before touching the database.
        now = utc_now()
        DomainGroup(
            id="",
            name=name,
            description=description,
            created_by=creator_id,
            created_at=now,
            updated_at=now,
        )
        with unit_of_work_scope(self._session_factory) as session:
            row = Group(
                name=name,
                description=description,
                created_by=creator_id,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            session.add(
                GroupMembership(
                    user_id=creator_id,
                    group_id=row.id,
                    role=GroupRole.ADMIN.value,
                    joined_at=now,
                )
            )
            session.flush()
            session.refresh(row)
            return _to_domain_group(row)

    def update(
        self, group_id: str, *, name: str, description: str | None
    ) -> DomainGroup | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Group, group_id)
            if row is None:
                return None
            current = _to_domain_group(row)
            # Re-validate the merged state.
            DomainGroup(
                id=current.id,
                name=name,
                description=description,
                created_by=current.created_by,
                created_at=current.created_at,
                updated_at=utc_now(),
            )
            row.name = name
            row.description = description
            row.updated_at = utc_now()
            session.flush()
            return _to_domain_group(row)

    def delete(self, group_id: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Group, group_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def find_membership(self, group_id: str, user_id: str) -> DomainMembership | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(GroupMembership, {"user_id": user_id, "group_id": group_id})
            return _to_domain_membership(row) if row else None

    def add_member(self, group_id: str, user_id: str, role: GroupRole) -> DomainMembership:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = GroupMembership(
                    user_id=user_id, group_id=group_id, role=role.value, joined_at=utc_now()
                )
                session.add(row)
                session.flush()
                return _to_domain_membership(row)
        except IntegrityError as exc:
            raise MembershipAlreadyExistsError(
                context={"group_id": group_id, "user_id": user_id}
            ) from exc

    def remove_member(self, group_id: str, user_id: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            deleted = (
                session.query(GroupMembership)
                .filter(GroupMembership.group_id == group_id, GroupMembership.user_id == user_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    def update_role(
        self, group_id: str, user_id: str, role: GroupRole
    ) -> DomainMembership | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(GroupMembership, {"user_id": user_id, "group_id": group_id})
            if row is None:
                return None
            row.role = role.value
            session.flush()
            return _to_domain_membership(row)

    def count_admins(self, group_id: str) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            return int(
                session.query(func.count())
                .select_from(GroupMembership)
                .filter(
                    GroupMembership.group_id == group_id,
                    GroupMembership.role == GroupRole.ADMIN.value,
                )
                .scalar()
                or 0
            )

    def list_members(self, group_id: str) -> list[GroupMember]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(GroupMembership, User)
                .join(User, User.id == GroupMembership.user_id)
                .filter(GroupMembership.group_id == group_id)
                .order_by(GroupMembership.joined_at.asc(), User.email.asc())
                .all()
            )
            return [
                GroupMember(
                    user_id=user.id,
                    email=user.email,
                    display_name=user.display_name,
                    role=GroupRole(membership.role),
                    joined_at=as_utc(membership.joined_at),
                )
                for membership, user in rows
            ]

    def list_for_user(self, user_id: str) -> list[UserGroup]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(GroupMembership)
                .options(joinedload(GroupMembership.group).joinedload(Group.creator))
                .filter(GroupMembership.user_id == user_id)
                .order_by(GroupMembership.joined_at.desc())
                .all()
            )
            return [
                UserGroup(
                    group=_to_domain_group(row.group),
                    role=GroupRole(row.role),
                    joined_at=as_utc(row.joined_at),
                )
                for row in rows
            ]


__all__ = ["SqlAlchemyGroupRepository"]
