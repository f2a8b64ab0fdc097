from __future__ import annotations

from datetime import timedelta

import pytest
from memory_repos import (
    DeterministicHasher,
    InMemorySessionRepository,
    InMemoryUserRepository,
)

from userhub.application.services.tokens import JwtTokenService
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
from userhub.domain.users.exceptions import (
    AccountDeactivatedError,
    CurrentPasswordIncorrectError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from userhub.shared.utils.clock import utc_now

SECRET = "unit-test-secret-0123456789abcdef"


class Env:
    def __init__(self) -> None:
        self.users = InMemoryUserRepository()
        self.sessions = InMemorySessionRepository()
        self.hasher = DeterministicHasher()
        self.tokens = JwtTokenService(secret=SECRET, ttl=timedelta(hours=1))
        self.register = RegisterUserUseCase(
            users=self.users,
            password_hasher=self.hasher,
            admin_emails=frozenset({"root@x.com"}),
        )
        self.login = LoginUserUseCase(
            users=self.users,
            sessions=self.sessions,
            tokens=self.tokens,
            password_hasher=self.hasher,
        )
        self.logout = LogoutUserUseCase(sessions=self.sessions)


@pytest.fixture()
def env() -> Env:
    return Env()


def test_register_user_success(env: Env) -> None:
    user = env.register.execute("A@X.com", "pw1")

    assert user.email == "a@x.com"
    assert user.display_name == "a"
    assert user.password_hash == "hashed:pw1"
    assert user.is_active is True
    assert user.is_admin is False
    assert env.users.find_by_email("a@x.com") is not None


def test_register_uses_given_display_name(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1", "Alice")
    assert user.display_name == "Alice"


def test_register_configured_admin_email_gets_admin_flag(env: Env) -> None:
    assert env.register.execute("root@x.com", "pw").is_admin is True


def test_register_duplicate_email(env: Env) -> None:
    env.register.execute("a@x.com", "pw1")

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        env.register.execute("a@x.com", "other")

    assert exc_info.value.code == "email_already_exists"
    assert exc_info.value.status == 400


def test_login_creates_session_matching_token_expiry(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")

    result = env.login.execute("a@x.com", "pw1")

    session = env.sessions.find_active_by_token(result.token)
    assert session is not None
    assert session.user_id == user.id
    assert session.expires_at == env.tokens.verify(result.token).expires_at
    assert env.users.find_by_id(user.id).last_login is not None


def test_each_login_gets_its_own_session(env: Env) -> None:
    env.register.execute("a@x.com", "pw1")

    first = env.login.execute("a@x.com", "pw1")
    second = env.login.execute("a@x.com", "pw1")

    assert first.token != second.token
    assert env.sessions.find_active_by_token(first.token) is not None
    assert env.sessions.find_active_by_token(second.token) is not None


def test_login_errors_do_not_reveal_which_part_was_wrong(env: Env) -> None:
    env.register.execute("a@x.com", "pw1")

    with pytest.raises(InvalidCredentialsError) as unknown:
        env.login.execute("nobody@x.com", "pw1")
    with pytest.raises(InvalidCredentialsError) as wrong:
        env.login.execute("a@x.com", "wrong")

    assert unknown.value.to_dict() == wrong.value.to_dict()
    assert unknown.value.status == wrong.value.status == 401


def test_login_unknown_email_still_runs_password_check(env: Env) -> None:
    with pytest.raises(InvalidCredentialsError):
        env.login.execute("nobody@x.com", "pw1")
    assert env.hasher.verify_calls == 1


def test_login_deactivated_only_after_password_verified(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")
    env.users.set_active(user.id, False)

    with pytest.raises(InvalidCredentialsError):
        env.login.execute("a@x.com", "wrong")
    with pytest.raises(AccountDeactivatedError) as exc_info:
        env.login.execute("a@x.com", "pw1")

    assert exc_info.value.status == 401
    assert env.sessions.sessions == {}


def test_logout_revokes_session(env: Env) -> None:
    env.register.execute("a@x.com", "pw1")
    token = env.login.execute("a@x.com", "pw1").token

    env.logout.execute(f"Bearer {token}")

    assert env.sessions.find_active_by_token(token) is None


@pytest.mark.parametrize("header", [None, "", "Bearer unknown", "Basic abc"])
def test_logout_is_a_noop_for_unknown_tokens(env: Env, header) -> None:
    env.logout.execute(header)


def test_profile_read_and_update(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")

    updated = UpdateProfileUseCase(users=env.users).execute(user.id, display_name="  Alice ")

    assert updated.display_name == "Alice"
    assert GetProfileUseCase(users=env.users).execute(user.id).display_name == "Alice"


def test_profile_of_missing_user(env: Env) -> None:
    with pytest.raises(UserNotFoundError):
        GetProfileUseCase(users=env.users).execute("missing")


def test_change_password_revokes_every_session(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")
    tokens = [env.login.execute("a@x.com", "pw1").token for _ in range(2)]
    change = ChangePasswordUseCase(
        users=env.users, sessions=env.sessions, password_hasher=env.hasher
    )

    revoked = change.execute(user.id, "pw1", "pw2")

    assert revoked == 2
    assert all(env.sessions.find_active_by_token(t) is None for t in tokens)
    env.login.execute("a@x.com", "pw2")
    with pytest.raises(InvalidCredentialsError):
        env.login.execute("a@x.com", "pw1")


def test_change_password_with_wrong_current_keeps_sessions(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")
    token = env.login.execute("a@x.com", "pw1").token
    change = ChangePasswordUseCase(
        users=env.users, sessions=env.sessions, password_hasher=env.hasher
    )

    with pytest.raises(CurrentPasswordIncorrectError):
        change.execute(user.id, "nope", "pw2")

    assert env.sessions.find_active_by_token(token) is not None
    assert env.users.find_by_id(user.id).password_hash == "hashed:pw1"


def test_failed_password_write_keeps_sessions(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")
    token = env.login.execute("a@x.com", "pw1").token

    def failing_update(user_id: str, password_hash: str) -> bool:
        raise RuntimeError("disk full")

    env.users.update_password = failing_update  # type: ignore[method-assign]
    change = ChangePasswordUseCase(
        users=env.users, sessions=env.sessions, password_hasher=env.hasher
    )

    with pytest.raises(RuntimeError):
        change.execute(user.id, "pw1", "pw2")

    assert env.sessions.find_active_by_token(token) is not None


def test_set_user_active_toggles_flag(env: Env) -> None:
    user = env.register.execute("a@x.com", "pw1")
    use_case = SetUserActiveUseCase(users=env.users)

    assert use_case.execute("admin", user.id, False).is_active is False
    assert use_case.execute("admin", user.id, True).is_active is True
    with pytest.raises(UserNotFoundError):
        use_case.execute("admin", "missing", True)


def test_purge_removes_only_expired_sessions(env: Env) -> None:
    now = utc_now()
    env.sessions.create("u-1", "live", now + timedelta(hours=1))
    env.sessions.create("u-1", "dead", now - timedelta(seconds=1))

    removed = PurgeExpiredSessionsUseCase(sessions=env.sessions).execute()

    assert removed == 1
    assert set(env.sessions.sessions) == {"live"}
