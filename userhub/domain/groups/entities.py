# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Groups and the user/group/role relation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from userhub.domain.exceptions import InvariantViolation

GROUP_NAME_MAX = 128
GROUP_DESCRIPTION_MAX = 1024


class GroupRole(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"


@dataclass(slots=True, frozen=True)
class Group:
    id: str
    name: str
    description: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime
    creator_name: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvariantViolation("group name is required", field="name")
        if len(self.name) > GROUP_NAME_MAX:
            raise InvariantViolation("group name is too long", field="name")
        if self.description is not None and len(self.description) > GROUP_DESCRIPTION_MAX:
            raise InvariantViolation("group description is too long", field="description")


@dataclass(slots=True, frozen=True)
class GroupMembership:
    user_id: str
    group_id: str
    role: GroupRole
    joined_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role is GroupRole.ADMIN


@dataclass(slots=True, frozen=True)
class GroupMember:
    """A membership row joined with the member's public profile."""

    user_id: str
    email: str
    display_name: str
    role: GroupRole
    joined_at: datetime


@dataclass(slots=True, frozen=True)
class UserGroup:
    """A group as seen from one of its members."""

    group: Group
    role: GroupRole
    joined_at: datetime
