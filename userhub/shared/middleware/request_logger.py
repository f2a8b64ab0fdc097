# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import time

from flask import Flask, g, request

from userhub.shared.config import load_config
from userhub.shared.logging import clear_correlation_id, logger, set_correlation_id

_REQUEST_ID_HEADER = "X-Request-ID"
_MAX_REQUEST_ID = 64


def _incoming_request_id() -> str:
    supplied = (request.headers.get(_REQUEST_ID_HEADER) or "").strip()
    if supplied and len(supplied) <= _MAX_REQUEST_ID and supplied.isprintable():
        return supplied
    return secrets.token_hex(8)


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        g.request_id = _incoming_request_id()
        g.request_started = time.perf_counter()
        set_correlation_id(g.request_id)
        if verbose:
            # Query values are omitted; only their names are logged.
            logger.debug(
                f"http.request: {request.method} {request.path} "
                f"args={sorted(request.args)} body_bytes={request.content_length or 0}"
            )

    @app.after_request
    def _finish(response):
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        logger.info(
            f"http.response: {request.method} {request.path} status={response.status_code} "
            f"ms={elapsed_ms:.1f} user={g.get('user_id', '-')}"
        )
        response.headers.setdefault(_REQUEST_ID_HEADER, g.get("request_id", "-"))
        return response

    @app.teardown_request
    def _cleanup(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"http.request: aborted by {type(exc).__name__} on {request.path}")
        clear_correlation_id()


__all__ = ["configure_request_logging"]
