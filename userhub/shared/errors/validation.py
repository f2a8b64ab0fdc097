# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Turn request-body validation failures into ``validation_error`` responses."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_path(loc: Iterable[Any]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def validation_context(errors: list[dict[str, str]]) -> dict[str, Any]:
    return {"fields": sorted({e["field"] for e in errors}), "errors": errors}


def field_error(field: str, message: str, kind: str = "value_error") -> dict[str, str]:
    return {"field": field, "type": kind, "message": message}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    errors = [
        field_error(_field_path(err.get("loc", ())), err.get("msg", ""), err.get("type", "value_error"))
        for err in exc.errors(include_url=False)
    ]
    raise ValidationError(context=validation_context(errors)) from exc


__all__ = ["field_error", "raise_validation_error", "validation_context"]
