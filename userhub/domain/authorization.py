# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Single decision point for role-based access control.

Callers build an :class:`Actor` from freshly loaded data (the user's global
admin flag and, for group resources, the actor's current role in that group)
and ask :func:`authorize` whether an :class:`Action` on a :class:`Resource` is
allowed. Nothing here touches HTTP or the database.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from userhub.domain.groups.entities import GroupRole


class Action(str, Enum):
    VIEW_GROUP = "group.view"
    VIEW_MEMBERS = "group.members.view"
    UPDATE_GROUP = "group.update"
    DELETE_GROUP = "group.delete"
    ADD_MEMBER = "group.members.add"
    REMOVE_MEMBER = "group.members.remove"
    CHANGE_ROLE = "group.members.change_role"
    MANAGE_USERS = "users.manage"
    PURGE_SESSIONS = "sessions.purge"


class ResourceKind(str, Enum):
    GROUP = "group"
    SYSTEM = "system"


@dataclass(slots=True, frozen=True)
class Resource:
    kind: ResourceKind
    id: str | None = None

    @classmethod
    def group(cls, group_id: str) -> Resource:
        return cls(ResourceKind.GROUP, group_id)

    @classmethod
    def system(cls) -> Resource:
        return cls(ResourceKind.SYSTEM)


@dataclass(slots=True, frozen=True)
class Actor:
    user_id: str
    is_admin: bool = False
    group_roles: Mapping[str, GroupRole] = field(default_factory=dict)

    def role_in(self, group_id: str | None) -> GroupRole | None:
        if group_id is None:
            return None
        return self.group_roles.get(group_id)


@dataclass(slots=True, frozen=True)
class Decision:
    allowed: bool
    reason: str

    def __bool__(self) -> bool:
        return self.allowed


_GROUP_ADMIN_ACTIONS = frozenset(
    {
        Action.UPDATE_GROUP,
        Action.DELETE_GROUP,
        Action.ADD_MEMBER,
        Action.REMOVE_MEMBER,
        Action.CHANGE_ROLE,
    }
)
_SYSTEM_ADMIN_ACTIONS = frozenset({Action.MANAGE_USERS, Action.PURGE_SESSIONS})


def authorize(actor: Actor, resource: Resource, action: Action) -> Decision:
    if resource.kind is ResourceKind.SYSTEM:
        if action not in _SYSTEM_ADMIN_ACTIONS:
            return Decision(False, "action_not_applicable")
        if actor.is_admin:
            return Decision(True, "global_admin")
        return Decision(False, "admin_required")

    if action in _SYSTEM_ADMIN_ACTIONS:
        return Decision(False, "action_not_applicable")

    if action is Action.VIEW_GROUP:
        return Decision(True, "authenticated")

    role = actor.role_in(resource.id)
    if action is Action.VIEW_MEMBERS:
        if role is None:
            return Decision(False, "group_membership_required")
        return Decision(True, "group_member")

    if action in _GROUP_ADMIN_ACTIONS:
        if role is GroupRole.ADMIN:
            return Decision(True, "group_admin")
        return Decision(False, "group_admin_required")

    return Decision(False, "unknown_action")


__all__ = ["Action", "Actor", "Decision", "Resource", "ResourceKind", "authorize"]
