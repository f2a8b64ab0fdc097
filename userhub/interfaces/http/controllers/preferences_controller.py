# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from userhub.application.services.authenticator import Authenticator
from userhub.application.services.preferences import PreferenceService
from userhub.infrastructure.auth_middleware import auth_required, current_auth
from userhub.interfaces.http.dto.preferences import PreferenceDTO, SetPreferenceDTO
from userhub.shared.errors.validation import raise_validation_error


class PreferencesController:
    def __init__(self, *, authenticator: Authenticator, preferences: PreferenceService) -> None:
        self._authenticator = authenticator
        self._preferences = preferences

    @auth_required
    def list(self) -> tuple[Response, int]:
        return jsonify({"preferences": self._preferences.list(current_auth().user_id)}), 200

    @auth_required
    def get(self, key: str) -> tuple[Response, int]:
        pref = self._preferences.get(current_auth().user_id, key)
        return jsonify(PreferenceDTO(key=pref.key, value=pref.value).model_dump()), 200

    @auth_required
    def put(self, key: str) -> tuple[Response, int]:
        try:
            dto = SetPreferenceDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        pref = self._preferences.set(current_auth().user_id, key, dto.value)
        return jsonify(PreferenceDTO(key=pref.key, value=pref.value).model_dump()), 200

    @auth_required
    def delete(self, key: str) -> tuple[Response, int]:
        self._preferences.delete(current_auth().user_id, key)
        return jsonify({"ok": True}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("preferences", __name__, url_prefix="/api/preferences")
        bp.add_url_rule("", endpoint="list", view_func=self.list, methods=["GET"])
        bp.add_url_rule("/<key>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/<key>", view_func=self.put, methods=["PUT"])
        bp.add_url_rule("/<key>", view_func=self.delete, methods=["DELETE"])
        return bp
