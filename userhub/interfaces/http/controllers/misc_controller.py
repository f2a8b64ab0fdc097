# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from userhub.infrastructure.health import check_database
from userhub.shared.logging import logger
from userhub.shared.utils.clock import utc_now


class MiscController:
    def health(self):
        payload: dict[str, object] = {"timestamp": utc_now().isoformat()}
        try:
            latency_ms = check_database()
        except SQLAlchemyError as exc:
            logger.error(f"health: database unreachable error={type(exc).__name__}")
            payload.update(status="degraded", database="error")
            return jsonify(payload), 503
        payload.update(status="ok", database="ok", databaseLatencyMs=round(latency_ms, 2))
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp
