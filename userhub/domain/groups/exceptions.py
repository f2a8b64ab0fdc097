# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.shared.errors.base import AuthorizationError, ConflictError, NotFoundError


class GroupNotFoundError(NotFoundError):
    code = "group_not_found"


class MembershipNotFoundError(NotFoundError):
    code = "membership_not_found"


class MembershipAlreadyExistsError(ConflictError):
    code = "membership_exists"


class LastGroupAdminError(ConflictError):
    code = "last_group_admin"


class GroupPermissionDeniedError(AuthorizationError):
    code = "group_permission_denied"
