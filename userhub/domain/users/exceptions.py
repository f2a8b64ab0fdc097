# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from userhub.shared.errors.base import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
)


class UserAlreadyExistsError(DomainError):
    code = "email_already_exists"
    status = HTTPStatus.BAD_REQUEST


class UserNotFoundError(NotFoundError):
    code = "user_not_found"


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"


class CurrentPasswordIncorrectError(AuthenticationError):
    code = "current_password_incorrect"


class MissingTokenError(AuthenticationError):
    code = "missing_token"


class InvalidTokenError(AuthenticationError):
    code = "invalid_token"


class TokenExpiredError(AuthenticationError):
    code = "token_expired"


class SessionExpiredError(AuthenticationError):
    code = "session_expired"


class AccountDeactivatedError(AuthorizationError):
    code = "account_deactivated"


class AdminRequiredError(AuthorizationError):
    code = "admin_required"
