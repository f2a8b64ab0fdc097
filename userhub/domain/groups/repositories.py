# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Group, GroupMember, GroupMembership, GroupRole, UserGroup


class GroupRepository(Protocol):
    def find_by_id(self, group_id: str) -> Group | None: ...
    def list(self, *, limit: int, offset: int) -> list[Group]: ...

    def create_with_admin(self, *, name: str, description: str | None, creator_id: str) -> Group:
        """Persist the group and the creator's admin membership in one transaction."""
        ...

    def update(self, group_id: str, *, name: str, description: str | None) -> Group | None: ...
    def delete(self, group_id: str) -> bool: ...

    def find_membership(self, group_id: str, user_id: str) -> GroupMembership | None: ...
    def add_member(self, group_id: str, user_id: str, role: GroupRole) -> GroupMembership: ...
    def remove_member(self, group_id: str, user_id: str) -> bool: ...
    def update_role(self, group_id: str, user_id: str, role: GroupRole) -> GroupMembership | None: ...
    def count_admins(self, group_id: str) -> int: ...
    def list_members(self, group_id: str) -> list[GroupMember]: ...
    def list_for_user(self, user_id: str) -> list[UserGroup]: ...
