# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Error taxonomy shared by every layer.

Each error carries a stable snake_case ``code``, the HTTP status it renders
with and optional structured ``context``. Subclasses pin ``code`` and
``status`` as class attributes; instances may still override either.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    @property
    def is_server_error(self) -> bool:
        return self.status >= HTTPStatus.INTERNAL_SERVER_ERROR

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        # Server-side failures never leak their context to clients.
        if self.context and not self.is_server_error:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    code = "domain_error"
    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        cls = type(self)
        super().__init__(code=code or cls.code, status=status or cls.status, context=context)


class ValidationError(DomainError):
    code = "validation_error"
    status = HTTPStatus.BAD_REQUEST


class AuthenticationError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED


class AuthorizationError(DomainError):
    code = "forbidden"
    status = HTTPStatus.FORBIDDEN


class NotFoundError(DomainError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND


class ConflictError(DomainError):
    code = "conflict"
    status = HTTPStatus.CONFLICT


class InfrastructureError(DomainError):
    code = "infrastructure_error"
    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self, code: str | None = None, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(code=code, context=context)
