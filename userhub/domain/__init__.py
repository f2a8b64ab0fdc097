# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .authorization import Action, Actor, Decision, Resource, authorize
from .exceptions import InvariantViolation
from .groups.entities import Group, GroupMember, GroupMembership, GroupRole, UserGroup
from .preferences.entities import Preference
from .users.entities import AuthContext, Session, User

__all__ = [
    "Action",
    "Actor",
    "AuthContext",
    "Decision",
    "Group",
    "GroupMember",
    "GroupMembership",
    "GroupRole",
    "InvariantViolation",
    "Preference",
    "Resource",
    "Session",
    "User",
    "UserGroup",
    "authorize",
]
