# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from userhub.domain.groups.entities import (
    GROUP_DESCRIPTION_MAX,
    GROUP_NAME_MAX,
    Group,
    GroupMember,
    GroupMembership,
    GroupRole,
    UserGroup,
)

from .common import CamelModel


def _parse_role(value: object) -> GroupRole:
    if isinstance(value, GroupRole):
        return value
    try:
        return GroupRole(value)
    except ValueError:
        raise PydanticCustomError(
            "role_invalid",
            "Role must be one of: {allowed}",
            {"allowed": ", ".join(r.value for r in GroupRole)},
        ) from None


class GroupWriteDTO(CamelModel):
    name: str = Field(min_length=1, max_length=GROUP_NAME_MAX)
    description: str | None = Field(default=None, max_length=GROUP_DESCRIPTION_MAX)

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("missing", "Group name cannot be blank", {})
        return value.strip()


class AddMemberDTO(CamelModel):
    user_id: str = Field(min_length=1, max_length=64)
    role: GroupRole = GroupRole.MEMBER

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, value: object) -> GroupRole:
        return _parse_role(value)


class ChangeRoleDTO(CamelModel):
    role: GroupRole

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, value: object) -> GroupRole:
        return _parse_role(value)


class GroupDTO(CamelModel):
    id: str
    name: str
    description: str | None
    created_by: str | None
    creator_name: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, group: Group) -> GroupDTO:
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            created_by=group.created_by,
            creator_name=group.creator_name,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class GroupMemberDTO(CamelModel):
    user_id: str
    email: str
    display_name: str
    role: GroupRole
    joined_at: datetime

    @classmethod
    def from_domain(cls, member: GroupMember) -> GroupMemberDTO:
        return cls(
            user_id=member.user_id,
            email=member.email,
            display_name=member.display_name,
            role=member.role,
            joined_at=member.joined_at,
        )


class GroupDetailDTO(GroupDTO):
    members: list[GroupMemberDTO]


class MembershipDTO(CamelModel):
    user_id: str
    group_id: str
    role: GroupRole
    joined_at: datetime

    @classmethod
    def from_domain(cls, membership: GroupMembership) -> MembershipDTO:
        return cls(
            user_id=membership.user_id,
            group_id=membership.group_id,
            role=membership.role,
            joined_at=membership.joined_at,
        )


class UserGroupDTO(GroupDTO):
    role: GroupRole
    joined_at: datetime

    @classmethod
    def from_user_group(cls, entry: UserGroup) -> UserGroupDTO:
        base = GroupDTO.from_domain(entry.group).model_dump()
        return cls(**base, role=entry.role, joined_at=entry.joined_at)


__all__ = [
    "AddMemberDTO",
    "ChangeRoleDTO",
    "GroupDTO",
    "GroupDetailDTO",
    "GroupMemberDTO",
    "GroupWriteDTO",
    "MembershipDTO",
    "UserGroupDTO",
]
