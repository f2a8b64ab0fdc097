# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Group management with role checks enforced at the service boundary.

Every mutating call re-reads the acting user's membership for the target group
and asks the authorization policy; nothing is trusted from an earlier request.
"""

from __future__ import annotations

from userhub.domain.authorization import Action, Actor, Decision, Resource, authorize
from userhub.domain.groups.entities import Group, GroupMember, GroupMembership, GroupRole, UserGroup
from userhub.domain.groups.exceptions import (
    GroupNotFoundError,
    GroupPermissionDeniedError,
    LastGroupAdminError,
    MembershipAlreadyExistsError,
    MembershipNotFoundError,
)
from userhub.domain.groups.repositories import GroupRepository
from userhub.domain.users.exceptions import UserNotFoundError
from userhub.domain.users.repositories import UserRepository
from userhub.shared.logging import logger


class GroupService:
    def __init__(self, *, groups: GroupRepository, users: UserRepository) -> None:
        self._groups = groups
        self._users = users

    # Queries

    def list_groups(self, *, limit: int = 10, page: int = 1) -> list[Group]:
        offset = (max(page, 1) - 1) * limit
        return self._groups.list(limit=limit, offset=offset)

    def get_group(self, group_id: str) -> tuple[Group, list[GroupMember]]:
        group = self._load_group(group_id)
        return group, self._groups.list_members(group_id)

    def list_members(self, actor_id: str, group_id: str) -> list[GroupMember]:
        self._require(actor_id, group_id, Action.VIEW_MEMBERS)
        return self._groups.list_members(group_id)

    def list_user_groups(self, user_id: str) -> list[UserGroup]:
        return self._groups.list_for_user(user_id)

    def is_member(self, user_id: str, group_id: str) -> bool:
        """Whether ``user_id`` holds any role in the group; unknown groups raise 404."""
        _, decision = self._decide(user_id, group_id, Action.VIEW_MEMBERS)
        return bool(decision)

    def is_admin(self, user_id: str, group_id: str) -> bool:
        """Whether ``user_id`` holds the admin role in the group; unknown groups raise 404."""
        _, decision = self._decide(user_id, group_id, Action.UPDATE_GROUP)
        return bool(decision)

    # Commands

    def create_group(self, actor_id: str, *, name: str, description: str | None) -> Group:
        group = self._groups.create_with_admin(
            name=name.strip(), description=description, creator_id=actor_id
        )
        logger.info(f"groups.create: ok group_id={group.id} creator={actor_id}")
        return group

    def update_group(
        self, actor_id: str, group_id: str, *, name: str, description: str | None
    ) -> Group:
        self._require(actor_id, group_id, Action.UPDATE_GROUP)
        updated = self._groups.update(group_id, name=name.strip(), description=description)
        if updated is None:
            raise GroupNotFoundError(context={"group_id": group_id})
        logger.info(f"groups.update: ok group_id={group_id} actor={actor_id}")
        return updated

    def delete_group(self, actor_id: str, group_id: str) -> None:
        self._require(actor_id, group_id, Action.DELETE_GROUP)
        if not self._groups.delete(group_id):
            raise GroupNotFoundError(context={"group_id": group_id})
        logger.info(f"groups.delete: ok group_id={group_id} actor={actor_id}")

    def add_member(
        self, actor_id: str, group_id: str, user_id: str, role: GroupRole = GroupRole.MEMBER
    ) -> GroupMembership:
        self._require(actor_id, group_id, Action.ADD_MEMBER)
        if self._users.find_by_id(user_id) is None:
            raise UserNotFoundError(context={"user_id": user_id})
        if self._groups.find_membership(group_id, user_id) is not None:
            raise MembershipAlreadyExistsError(context={"group_id": group_id, "user_id": user_id})
        membership = self._groups.add_member(group_id, user_id, role)
        logger.info(
            f"groups.add_member: ok group_id={group_id} user_id={user_id} "
            f"role={role.value} actor={actor_id}"
        )
        return membership

    def remove_member(self, actor_id: str, group_id: str, user_id: str) -> None:
        self._require(actor_id, group_id, Action.REMOVE_MEMBER)
        membership = self._groups.find_membership(group_id, user_id)
        if membership is None:
            raise MembershipNotFoundError(context={"group_id": group_id, "user_id": user_id})
        if membership.is_admin:
            self._ensure_other_admin(group_id)
        if not self._groups.remove_member(group_id, user_id):
            raise MembershipNotFoundError(context={"group_id": group_id, "user_id": user_id})
        logger.info(
            f"groups.remove_member: ok group_id={group_id} user_id={user_id} actor={actor_id}"
        )

    def change_role(
        self, actor_id: str, group_id: str, user_id: str, role: GroupRole
    ) -> GroupMembership:
        self._require(actor_id, group_id, Action.CHANGE_ROLE)
        membership = self._groups.find_membership(group_id, user_id)
        if membership is None:
            raise MembershipNotFoundError(context={"group_id": group_id, "user_id": user_id})
        if membership.is_admin and role is not GroupRole.ADMIN:
            self._ensure_other_admin(group_id)
        updated = self._groups.update_role(group_id, user_id, role)
        if updated is None:
            raise MembershipNotFoundError(context={"group_id": group_id, "user_id": user_id})
        logger.info(
            f"groups.change_role: ok group_id={group_id} user_id={user_id} "
            f"role={role.value} actor={actor_id}"
        )
        return updated

    # Internals

    def _load_group(self, group_id: str) -> Group:
        group = self._groups.find_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(context={"group_id": group_id})
        return group

    def _decide(self, actor_id: str, group_id: str, action: Action) -> tuple[Group, Decision]:
        group = self._load_group(group_id)
        membership = self._groups.find_membership(group_id, actor_id)
        roles = {group_id: membership.role} if membership else {}
        return group, authorize(Actor(user_id=actor_id, group_roles=roles), Resource.group(group_id), action)

    def _require(self, actor_id: str, group_id: str, action: Action) -> Group:
        group, decision = self._decide(actor_id, group_id, action)
        if not decision:
            logger.info(
                f"groups.authorize: denied action={action.value} group_id={group_id} "
                f"actor={actor_id} reason={decision.reason}"
            )
            raise GroupPermissionDeniedError(context={"group_id": group_id, "reason": decision.reason})
        return group

    def _ensure_other_admin(self, group_id: str) -> None:
        if self._groups.count_admins(group_id) <= 1:
            raise LastGroupAdminError(context={"group_id": group_id})


__all__ = ["GroupService"]
