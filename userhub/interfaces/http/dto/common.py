# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input, dumps camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
    )


class PageQueryDTO(CamelModel):
    limit: int = Field(default=10, ge=1, le=100)
    page: int = Field(default=1, ge=1)


__all__ = ["CamelModel", "PageQueryDTO"]
