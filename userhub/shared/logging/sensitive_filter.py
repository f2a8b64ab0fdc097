# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

_MASK = "<redacted>"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # Bare JWTs, wherever they appear.
    (re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+"), "<jwt>"),
    (re.compile(r"(\bbearer\s+)\S+", re.IGNORECASE), rf"\1{_MASK}"),
    (re.compile(r"(\bauthorization\s*[:=]\s*)\S+", re.IGNORECASE), rf"\1{_MASK}"),
    (
        re.compile(
            r"(\b(?:password|new_password|current_password|token|secret|secret_key|jwt_secret)"
            r"\s*[:=]\s*['\"]?)[^'\"\s,}]+",
            re.IGNORECASE,
        ),
        rf"\1{_MASK}",
    ),
    # Credentials embedded in database URLs.
    (re.compile(r"(\w+(?:\+\w+)?://[^:/@\s]+:)[^@\s]+@"), rf"\1{_MASK}@"),
]


def redact(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    record["message"] = redact(record["message"])
    return True
