# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import Field, StrictStr

from userhub.domain.preferences.entities import PREFERENCE_VALUE_MAX

from .common import CamelModel


class SetPreferenceDTO(CamelModel):
    value: StrictStr = Field(max_length=PREFERENCE_VALUE_MAX)


class PreferenceDTO(CamelModel):
    key: str
    value: str


__all__ = ["PreferenceDTO", "SetPreferenceDTO"]
