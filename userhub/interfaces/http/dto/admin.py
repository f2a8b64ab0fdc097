# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import Field, StrictBool

from .common import CamelModel, PageQueryDTO


class UserListQueryDTO(PageQueryDTO):
    limit: int = Field(default=50, ge=1, le=100)


class SetActiveDTO(CamelModel):
    active: StrictBool


class PurgeResultDTO(CamelModel):
    removed: int


__all__ = ["PurgeResultDTO", "SetActiveDTO", "UserListQueryDTO"]
