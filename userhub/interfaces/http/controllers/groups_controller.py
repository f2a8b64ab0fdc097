# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from userhub.application.services.authenticator import Authenticator
from userhub.application.services.groups import GroupService
from userhub.infrastructure.auth_middleware import (
    auth_required,
    current_auth,
    require_group_admin,
    require_group_member,
)
from userhub.interfaces.http.dto.common import PageQueryDTO
from userhub.interfaces.http.dto.groups import (
    AddMemberDTO,
    ChangeRoleDTO,
    GroupDetailDTO,
    GroupDTO,
    GroupMemberDTO,
    GroupWriteDTO,
    MembershipDTO,
    UserGroupDTO,
)
from userhub.shared.errors.validation import raise_validation_error


class GroupsController:
    def __init__(self, *, authenticator: Authenticator, groups: GroupService) -> None:
        self._authenticator = authenticator
        self._groups = groups

    @auth_required
    def create(self) -> tuple[Response, int]:
        try:
            dto = GroupWriteDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        group = self._groups.create_group(
            current_auth().user_id, name=dto.name, description=dto.description
        )
        return jsonify(GroupDTO.from_domain(group).model_dump(mode="json")), 201

    @auth_required
    def list(self) -> tuple[Response, int]:
        try:
            query = PageQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        groups = self._groups.list_groups(limit=query.limit, page=query.page)
        return jsonify(
            {
                "groups": [GroupDTO.from_domain(g).model_dump(mode="json") for g in groups],
                "page": query.page,
                "limit": query.limit,
            }
        ), 200

    @auth_required
    def get(self, group_id: str) -> tuple[Response, int]:
        group, members = self._groups.get_group(group_id)
        detail = GroupDetailDTO(
            **GroupDTO.from_domain(group).model_dump(by_alias=False),
            members=[GroupMemberDTO.from_domain(m) for m in members],
        )
        return jsonify(detail.model_dump(mode="json")), 200

    @auth_required
    @require_group_admin()
    def update(self, group_id: str) -> tuple[Response, int]:
        try:
            dto = GroupWriteDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        group = self._groups.update_group(
            current_auth().user_id, group_id, name=dto.name, description=dto.description
        )
        return jsonify(GroupDTO.from_domain(group).model_dump(mode="json")), 200

    @auth_required
    @require_group_admin()
    def delete(self, group_id: str) -> tuple[Response, int]:
        self._groups.delete_group(current_auth().user_id, group_id)
        return jsonify({"ok": True}), 200

    @auth_required
    @require_group_member()
    def members(self, group_id: str) -> tuple[Response, int]:
        members = self._groups.list_members(current_auth().user_id, group_id)
        return jsonify(
            {"members": [GroupMemberDTO.from_domain(m).model_dump(mode="json") for m in members]}
        ), 200

    @auth_required
    @require_group_admin()
    def add_member(self, group_id: str) -> tuple[Response, int]:
        try:
            dto = AddMemberDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        membership = self._groups.add_member(current_auth().user_id, group_id, dto.user_id, dto.role)
        return jsonify(MembershipDTO.from_domain(membership).model_dump(mode="json")), 201

    @auth_required
    @require_group_admin()
    def remove_member(self, group_id: str, user_id: str) -> tuple[Response, int]:
        self._groups.remove_member(current_auth().user_id, group_id, user_id)
        return jsonify({"ok": True}), 200

    @auth_required
    @require_group_admin()
    def change_role(self, group_id: str, user_id: str) -> tuple[Response, int]:
        try:
            dto = ChangeRoleDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        membership = self._groups.change_role(current_auth().user_id, group_id, user_id, dto.role)
        return jsonify(MembershipDTO.from_domain(membership).model_dump(mode="json")), 200

    @auth_required
    def user_groups(self, user_id: str | None = None) -> tuple[Response, int]:
        entries = self._groups.list_user_groups(user_id or current_auth().user_id)
        return jsonify(
            {"groups": [UserGroupDTO.from_user_group(e).model_dump(mode="json") for e in entries]}
        ), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("groups", __name__, url_prefix="/api/groups")
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("", endpoint="list", view_func=self.list, methods=["GET"])
        bp.add_url_rule("/user", endpoint="own_groups", view_func=self.user_groups, methods=["GET"])
        bp.add_url_rule("/user/<user_id>", view_func=self.user_groups, methods=["GET"])
        bp.add_url_rule("/<group_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/<group_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/<group_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/<group_id>/members", view_func=self.members, methods=["GET"])
        bp.add_url_rule("/<group_id>/users", view_func=self.add_member, methods=["POST"])
        bp.add_url_rule(
            "/<group_id>/users/<user_id>", view_func=self.remove_member, methods=["DELETE"]
        )
        bp.add_url_rule(
            "/<group_id>/users/<user_id>/role", view_func=self.change_role, methods=["PUT"]
        )
        return bp
