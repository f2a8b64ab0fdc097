# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from dataclasses import dataclass

from userhub.domain.exceptions import InvariantViolation

PREFERENCE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]{1,128}$")
PREFERENCE_VALUE_MAX = 4096


def validate_key(key: str) -> str:
    if not isinstance(key, str) or not PREFERENCE_KEY_PATTERN.match(key):
        raise InvariantViolation(
            "key must be 1-128 characters of letters, digits, '_', '.' or '-'", field="key"
        )
    return key


def validate_value(value: object) -> str:
    # Values are plain strings; anything structured must be encoded by the client.
    if not isinstance(value, str):
        raise InvariantViolation("value must be a string", field="value")
    if len(value) > PREFERENCE_VALUE_MAX:
        raise InvariantViolation(
            f"value must be at most {PREFERENCE_VALUE_MAX} characters", field="value"
        )
    return value


@dataclass(slots=True, frozen=True)
class Preference:
    user_id: str
    key: str
    value: str

    def __post_init__(self) -> None:
        validate_key(self.key)
        validate_value(self.value)
