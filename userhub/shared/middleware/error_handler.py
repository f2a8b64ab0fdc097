# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""JSON error rendering: every failure becomes ``{"error": code[, "context": ...]}``."""

from __future__ import annotations

import re
from http import HTTPStatus

from flask import Flask, g, jsonify, request
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from werkzeug.exceptions import HTTPException

from userhub.domain.exceptions import InvariantViolation
from userhub.shared.config import load_config
from userhub.shared.errors import AppError, ValidationError
from userhub.shared.errors.validation import field_error, validation_context
from userhub.shared.logging import logger


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_") or "http_error"


def _render(error: AppError):
    return jsonify(error.to_dict()), error.status


def configure_error_handling(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        where = f"{request.method} {request.path}"
        if exc.is_server_error:
            logger.error(f"http.error: {exc.code} on {where}")
        else:
            logger.info(f"http.error: {exc.code} status={int(exc.status)} on {where}")
        return _render(exc)

    @app.errorhandler(InvariantViolation)
    def _invariant(exc: InvariantViolation):
        field = exc.field or "body"
        logger.info(f"http.error: validation_error field={field} on {request.path}")
        return _render(
            ValidationError(context=validation_context([field_error(field, exc.message)]))
        )

    @app.errorhandler(HTTPException)
    def _http(exc: HTTPException):
        return jsonify({"error": _slug(exc.name or "")}), exc.code or HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(PoolTimeoutError)
    def _pool_exhausted(_exc: PoolTimeoutError):
        logger.error(f"db.pool: checkout timed out on {request.method} {request.path}")
        response = jsonify({"error": "database_unavailable"})
        response.headers["Retry-After"] = "1"
        return response, HTTPStatus.SERVICE_UNAVAILABLE

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        if verbose:
            logger.exception(
                f"http.error: unhandled on {request.method} {request.path} "
                f"user={getattr(g, 'user_id', None)}"
            )
        else:
            logger.error(f"http.error: unhandled {type(exc).__name__} on {request.method} {request.path}")
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR


__all__ = ["configure_error_handling"]
