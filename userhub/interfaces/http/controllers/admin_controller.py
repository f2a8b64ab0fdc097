# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from userhub.application.services.authenticator import Authenticator
from userhub.application.use_cases.admin.list_users import ListUsersUseCase
from userhub.application.use_cases.admin.purge_sessions import PurgeExpiredSessionsUseCase
from userhub.application.use_cases.admin.set_user_active import SetUserActiveUseCase
from userhub.domain.authorization import Action
from userhub.infrastructure.auth_middleware import (
    auth_required,
    current_auth,
    require_admin,
    require_system_permission,
)
from userhub.interfaces.http.dto.admin import PurgeResultDTO, SetActiveDTO, UserListQueryDTO
from userhub.interfaces.http.dto.auth import UserDTO
from userhub.shared.errors.validation import raise_validation_error


class AdminController:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        list_users: ListUsersUseCase,
        set_user_active: SetUserActiveUseCase,
        purge_sessions: PurgeExpiredSessionsUseCase,
    ) -> None:
        self._authenticator = authenticator
        self._list_users = list_users
        self._set_user_active = set_user_active
        self._purge_sessions = purge_sessions

    @auth_required
    @require_admin
    def users(self) -> tuple[Response, int]:
        try:
            query = UserListQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        users = self._list_users.execute(limit=query.limit, page=query.page)
        return jsonify(
            {
                "users": [UserDTO.from_domain(u).model_dump(mode="json") for u in users],
                "page": query.page,
                "limit": query.limit,
            }
        ), 200

    @auth_required
    @require_admin
    def set_active(self, user_id: str) -> tuple[Response, int]:
        try:
            dto = SetActiveDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._set_user_active.execute(current_auth().user_id, user_id, dto.active)
        return jsonify(UserDTO.from_domain(user).model_dump(mode="json")), 200

    @auth_required
    @require_system_permission(Action.PURGE_SESSIONS)
    def purge_sessions(self) -> tuple[Response, int]:
        removed = self._purge_sessions.execute()
        return jsonify(PurgeResultDTO(removed=removed).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("admin", __name__, url_prefix="/api/admin")
        bp.add_url_rule("/users", view_func=self.users, methods=["GET"])
        bp.add_url_rule("/users/<user_id>/active", view_func=self.set_active, methods=["PUT"])
        bp.add_url_rule("/sessions/purge", view_func=self.purge_sessions, methods=["POST"])
        return bp
