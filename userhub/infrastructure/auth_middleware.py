# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Route guards for controller methods.

``auth_required`` runs the full authentication protocol and leaves an
``AuthContext`` on ``flask.g``. The capability guards stack below it and
re-read roles from the store on every request:

    @auth_required
    @require_group_admin()
    def update(self, group_id): ...

Controllers using these guards expose ``_authenticator`` (an
``Authenticator``) and, for the group guards, ``_groups`` (a ``GroupService``).
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from userhub.domain.authorization import Action, Actor, Resource, authorize
from userhub.domain.groups.exceptions import GroupPermissionDeniedError
from userhub.domain.users.entities import AuthContext
from userhub.domain.users.exceptions import AdminRequiredError, MissingTokenError
from userhub.shared.errors.base import AppError, InfrastructureError
from userhub.shared.logging import logger


def current_auth() -> AuthContext:
    auth = getattr(g, "auth", None)
    if auth is None:
        raise MissingTokenError()
    return auth


def auth_required(func: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        auth = self._authenticator.authenticate(request.headers.get("Authorization"))
        g.auth = auth
        g.user_id = auth.user_id
        logger.debug(f"auth: ok user_id={auth.user_id} {request.method} {request.path}")
        return func(self, *args, **kwargs)

    return wrapper


def require_system_permission(action: Action) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            auth = current_auth()
            decision = authorize(
                Actor(user_id=auth.user_id, is_admin=auth.is_admin), Resource.system(), action
            )
            if not decision:
                logger.warning(
                    f"admin: denied user_id={auth.user_id} action={action.value} "
                    f"on {request.method} {request.path}"
                )
                raise AdminRequiredError()
            return func(self, *args, **kwargs)

        return wrapper

    return decorator


require_admin = require_system_permission(Action.MANAGE_USERS)


def _group_guard(predicate: str, role: str, view_arg: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            auth = current_auth()
            group_id = kwargs.get(view_arg)
            try:
                allowed = getattr(self._groups, predicate)(auth.user_id, group_id)
            except (AppError, PoolTimeoutError):
                raise
            except Exception as exc:
                logger.exception(
                    f"authz: lookup failed group_id={group_id} user_id={auth.user_id}"
                )
                raise InfrastructureError("authorization_check_failed") from exc
            if not allowed:
                logger.info(f"authz: denied role={role} group_id={group_id} user_id={auth.user_id}")
                raise GroupPermissionDeniedError(
                    context={"group_id": group_id, "reason": f"group_{role}_required"}
                )
            return func(self, *args, **kwargs)

        return wrapper

    return decorator


def require_group_member(view_arg: str = "group_id"):
    return _group_guard("is_member", "member", view_arg)


def require_group_admin(view_arg: str = "group_id"):
    return _group_guard("is_admin", "admin", view_arg)


__all__ = [
    "auth_required",
    "current_auth",
    "require_admin",
    "require_group_admin",
    "require_group_member",
    "require_system_permission",
]
