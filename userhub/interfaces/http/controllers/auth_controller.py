# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from userhub.application.services.authenticator import Authenticator
from userhub.application.use_cases.users.login_user import LoginUserUseCase
from userhub.application.use_cases.users.logout_user import LogoutUserUseCase
from userhub.application.use_cases.users.profile import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileUseCase,
)
from userhub.application.use_cases.users.register_user import RegisterUserUseCase
from userhub.infrastructure.auth_middleware import auth_required, current_auth
from userhub.interfaces.http.dto.auth import (
    ChangePasswordRequestDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    OkDTO,
    RegisteredUserDTO,
    RegisterRequestDTO,
    UpdateProfileRequestDTO,
    UserDTO,
)
from userhub.shared.errors.validation import raise_validation_error
from userhub.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        get_profile_use_case: GetProfileUseCase,
        update_profile_use_case: UpdateProfileUseCase,
        change_password_use_case: ChangePasswordUseCase,
    ) -> None:
        self._authenticator = authenticator
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._get_profile_use_case = get_profile_use_case
        self._update_profile_use_case = update_profile_use_case
        self._change_password_use_case = change_password_use_case

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.email, dto.password, dto.display_name)
        return jsonify(RegisteredUserDTO.from_domain(user).model_dump(mode="json")), 201

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._login_use_case.execute(dto.email, dto.password)
        payload = LoginResponseDTO(token=result.token, user=UserDTO.from_domain(result.user))
        return jsonify(payload.model_dump(mode="json")), 200

    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(request.headers.get("Authorization"))
        return jsonify(OkDTO().model_dump()), 200

    @auth_required
    def profile(self) -> tuple[Response, int]:
        user = self._get_profile_use_case.execute(current_auth().user_id)
        return jsonify(UserDTO.from_domain(user).model_dump(mode="json")), 200

    @auth_required
    def update_profile(self) -> tuple[Response, int]:
        try:
            dto = UpdateProfileRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._update_profile_use_case.execute(
            current_auth().user_id, display_name=dto.display_name
        )
        return jsonify(UserDTO.from_domain(user).model_dump(mode="json")), 200

    @auth_required
    def change_password(self) -> tuple[Response, int]:
        try:
            dto = ChangePasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        self._change_password_use_case.execute(
            current_auth().user_id, dto.current_password, dto.new_password
        )
        return jsonify(OkDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/profile", view_func=self.profile, methods=["GET"])
        bp.add_url_rule(
            "/profile", endpoint="update_profile", view_func=self.update_profile, methods=["PUT"]
        )
        bp.add_url_rule("/change-password", view_func=self.change_password, methods=["POST"])
        return bp
