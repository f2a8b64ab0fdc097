# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from functools import cached_property

from sqlalchemy.orm import Session

from userhub.application.services.authenticator import Authenticator
from userhub.application.services.groups import GroupService
from userhub.application.services.password_hashing import WerkzeugPasswordHasher
from userhub.application.services.preferences import PreferenceService
from userhub.application.services.tokens import JwtTokenService
from userhub.application.use_cases.admin.list_users import ListUsersUseCase
from userhub.application.use_cases.admin.purge_sessions import PurgeExpiredSessionsUseCase
from userhub.application.use_cases.admin.set_user_active import SetUserActiveUseCase
from userhub.application.use_cases.users.login_user import LoginUserUseCase
from userhub.application.use_cases.users.logout_user import LogoutUserUseCase
from userhub.application.use_cases.users.profile import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileUseCase,
)
from userhub.application.use_cases.users.register_user import RegisterUserUseCase
from userhub.infrastructure.db import SessionLocal
from userhub.infrastructure.repositories.groups import SqlAlchemyGroupRepository
from userhub.infrastructure.repositories.preferences import SqlAlchemyPreferenceRepository
from userhub.infrastructure.repositories.users import (
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)
from userhub.interfaces.http.controllers.admin_controller import AdminController
from userhub.interfaces.http.controllers.auth_controller import AuthController
from userhub.interfaces.http.controllers.groups_controller import GroupsController
from userhub.interfaces.http.controllers.misc_controller import MiscController
from userhub.interfaces.http.controllers.preferences_controller import PreferencesController
from userhub.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self._config = config or load_config()
        self._session_factory = session_factory or SessionLocal

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self._session_factory)

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository(self._session_factory)

    @cached_property
    def group_repository(self) -> SqlAlchemyGroupRepository:
        return SqlAlchemyGroupRepository(self._session_factory)

    @cached_property
    def preference_repository(self) -> SqlAlchemyPreferenceRepository:
        return SqlAlchemyPreferenceRepository(self._session_factory)

    # Services

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_service(self) -> JwtTokenService:
        auth = self._config.auth
        return JwtTokenService(
            secret=self._config.token_secret(),
            ttl=timedelta(seconds=auth.token_ttl_seconds),
            algorithm=auth.jwt_algorithm,
        )

    @cached_property
    def authenticator(self) -> Authenticator:
        return Authenticator(
            tokens=self.token_service,
            sessions=self.session_repository,
            users=self.user_repository,
        )

    @cached_property
    def group_service(self) -> GroupService:
        return GroupService(groups=self.group_repository, users=self.user_repository)

    @cached_property
    def preference_service(self) -> PreferenceService:
        return PreferenceService(preferences=self.preference_repository)

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            admin_emails=frozenset(self._config.auth.admin_emails),
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_repository)

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(users=self.user_repository)

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(users=self.user_repository)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            users=self.user_repository,
            sessions=self.session_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def set_user_active_use_case(self) -> SetUserActiveUseCase:
        return SetUserActiveUseCase(users=self.user_repository)

    @cached_property
    def purge_sessions_use_case(self) -> PurgeExpiredSessionsUseCase:
        return PurgeExpiredSessionsUseCase(sessions=self.session_repository)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            authenticator=self.authenticator,
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            get_profile_use_case=self.get_profile_use_case,
            update_profile_use_case=self.update_profile_use_case,
            change_password_use_case=self.change_password_use_case,
        )

    @cached_property
    def groups_controller(self) -> GroupsController:
        return GroupsController(authenticator=self.authenticator, groups=self.group_service)

    @cached_property
    def preferences_controller(self) -> PreferencesController:
        return PreferencesController(
            authenticator=self.authenticator, preferences=self.preference_service
        )

    @cached_property
    def admin_controller(self) -> AdminController:
        return AdminController(
            authenticator=self.authenticator,
            list_users=self.list_users_use_case,
            set_user_active=self.set_user_active_use_case,
            purge_sessions=self.purge_sessions_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()
