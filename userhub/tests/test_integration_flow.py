from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from userhub.app import create_app
from userhub.infrastructure.admin_setup import setup_admin_users
from userhub.infrastructure.db import SessionLocal
from userhub.infrastructure.db.models import Group, GroupMembership, User
from userhub.infrastructure.repositories.groups import SqlAlchemyGroupRepository
from userhub.infrastructure.repositories.users import (
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)
from userhub.scripts import purge_sessions
from userhub.shared.utils.clock import utc_now

pytestmark = pytest.mark.usefixtures("reset_database")


@pytest.fixture()
def client():
    app = create_app()
    with app.test_client() as test_client:
        yield test_client


def _register(client, email: str, password: str = "pw1") -> dict:
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _login(client, email: str, password: str = "pw1") -> str:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["token"]


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_login_profile_logout_flow(client) -> None:
    created = _register(client, "a@x.com", "pw1")
    assert created["email"] == "a@x.com"
    assert created["displayName"] == "a"

    token = _login(client, "a@x.com", "pw1")

    profile = client.get("/api/auth/profile", headers=_bearer(token))
    assert profile.status_code == 200
    assert profile.get_json()["email"] == "a@x.com"
    assert profile.get_json()["lastLogin"] is not None

    logout = client.post("/api/auth/logout", headers=_bearer(token))
    assert logout.status_code == 200

    after = client.get("/api/auth/profile", headers=_bearer(token))
    assert after.status_code == 401
    assert after.get_json()["error"] == "session_expired"


def test_duplicate_registration_and_bad_login(client) -> None:
    _register(client, "a@x.com")
    duplicate = client.post("/api/auth/register", json={"email": "A@X.com", "password": "x"})
    assert duplicate.status_code == 400
    assert duplicate.get_json()["error"] == "email_already_exists"

    wrong = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "b@x.com", "password": "pw1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json() == {"error": "invalid_credentials"}


def test_missing_and_forged_tokens(client) -> None:
    missing = client.get("/api/auth/profile")
    assert missing.status_code == 401
    assert missing.get_json()["error"] == "missing_token"

    forged = client.get("/api/auth/profile", headers=_bearer("abc.def.ghi"))
    assert forged.status_code == 401
    assert forged.get_json()["error"] == "invalid_token"


def test_update_profile(client) -> None:
    _register(client, "a@x.com")
    token = _login(client, "a@x.com")

    response = client.put(
        "/api/auth/profile", json={"displayName": "Alice"}, headers=_bearer(token)
    )

    assert response.status_code == 200
    assert response.get_json()["displayName"] == "Alice"


def test_change_password_revokes_all_sessions(client) -> None:
    _register(client, "a@x.com", "pw1")
    first = _login(client, "a@x.com", "pw1")
    second = _login(client, "a@x.com", "pw1")

    changed = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "pw1", "newPassword": "pw2"},
        headers=_bearer(first),
    )
    assert changed.status_code == 200

    for token in (first, second):
        assert client.get("/api/auth/profile", headers=_bearer(token)).status_code == 401
    new_token = _login(client, "a@x.com", "pw2")
    assert client.get("/api/auth/profile", headers=_bearer(new_token)).status_code == 200


def test_change_password_with_wrong_current_password(client) -> None:
    _register(client, "a@x.com", "pw1")
    token = _login(client, "a@x.com", "pw1")

    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "bad", "newPassword": "pw2"},
        headers=_bearer(token),
    )

    assert response.status_code == 401
    assert response.get_json()["error"] == "current_password_incorrect"
    assert client.get("/api/auth/profile", headers=_bearer(token)).status_code == 200


def test_deactivated_account_is_forbidden_until_reactivated(client) -> None:
    _register(client, "root@example.com", "rootpw")
    admin = _login(client, "root@example.com", "rootpw")
    user = _register(client, "a@x.com")
    token = _login(client, "a@x.com")

    off = client.put(
        f"/api/admin/users/{user['id']}/active", json={"active": False}, headers=_bearer(admin)
    )
    assert off.status_code == 200
    assert off.get_json()["isActive"] is False

    blocked = client.get("/api/auth/profile", headers=_bearer(token))
    assert blocked.status_code == 403
    assert blocked.get_json()["error"] == "account_deactivated"

    relogin = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw1"})
    assert relogin.status_code == 401
    assert relogin.get_json()["error"] == "account_deactivated"

    client.put(
        f"/api/admin/users/{user['id']}/active", json={"active": True}, headers=_bearer(admin)
    )
    assert client.get("/api/auth/profile", headers=_bearer(token)).status_code == 200


def test_admin_routes_reject_regular_users(client) -> None:
    _register(client, "a@x.com")
    token = _login(client, "a@x.com")

    response = client.get("/api/admin/users", headers=_bearer(token))

    assert response.status_code == 403
    assert response.get_json()["error"] == "admin_required"


def test_admin_lists_users(client) -> None:
    _register(client, "root@example.com", "rootpw")
    _register(client, "a@x.com")
    admin = _login(client, "root@example.com", "rootpw")

    response = client.get("/api/admin/users?limit=10", headers=_bearer(admin))

    assert response.status_code == 200
    emails = {u["email"] for u in response.get_json()["users"]}
    assert emails == {"root@example.com", "a@x.com"}


def test_group_creation_is_atomic_and_creator_is_admin(client) -> None:
    _register(client, "owner@x.com")
    owner = _login(client, "owner@x.com")

    created = client.post(
        "/api/groups", json={"name": "Team", "description": "d"}, headers=_bearer(owner)
    )
    assert created.status_code == 201
    group_id = created.get_json()["id"]

    mine = client.get("/api/groups/user", headers=_bearer(owner)).get_json()["groups"]
    assert [(g["id"], g["role"]) for g in mine] == [(group_id, "admin")]

    rejected = client.post("/api/groups", json={"name": "   "}, headers=_bearer(owner))
    assert rejected.status_code == 400
    session = SessionLocal()
    try:
        assert session.query(Group).count() == 1
        assert session.query(GroupMembership).count() == 1
    finally:
        session.close()


def test_group_role_enforcement(client) -> None:
    _register(client, "owner@x.com")
    member = _register(client, "member@x.com")
    _register(client, "outsider@x.com")
    owner_token = _login(client, "owner@x.com")
    member_token = _login(client, "member@x.com")
    outsider_token = _login(client, "outsider@x.com")

    group_id = client.post(
        "/api/groups", json={"name": "Team"}, headers=_bearer(owner_token)
    ).get_json()["id"]
    added = client.post(
        f"/api/groups/{group_id}/users",
        json={"userId": member["id"]},
        headers=_bearer(owner_token),
    )
    assert added.status_code == 201

    denied = client.put(
        f"/api/groups/{group_id}", json={"name": "Hijack"}, headers=_bearer(member_token)
    )
    assert denied.status_code == 403
    assert denied.get_json()["error"] == "group_permission_denied"

    missing = client.put(
        "/api/groups/does-not-exist", json={"name": "X"}, headers=_bearer(member_token)
    )
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "group_not_found"

    members = client.get(f"/api/groups/{group_id}/members", headers=_bearer(member_token))
    assert members.status_code == 200
    assert len(members.get_json()["members"]) == 2
    assert (
        client.get(f"/api/groups/{group_id}/members", headers=_bearer(outsider_token)).status_code
        == 403
    )

    promoted = client.put(
        f"/api/groups/{group_id}/users/{member['id']}/role",
        json={"role": "admin"},
        headers=_bearer(owner_token),
    )
    assert promoted.status_code == 200
    renamed = client.put(
        f"/api/groups/{group_id}", json={"name": "Renamed"}, headers=_bearer(member_token)
    )
    assert renamed.status_code == 200
    assert renamed.get_json()["name"] == "Renamed"

    duplicate = client.post(
        f"/api/groups/{group_id}/users",
        json={"userId": member["id"]},
        headers=_bearer(owner_token),
    )
    assert duplicate.status_code == 409


def test_group_listing_and_deletion(client) -> None:
    _register(client, "owner@x.com")
    token = _login(client, "owner@x.com")
    ids = [
        client.post("/api/groups", json={"name": f"g{i}"}, headers=_bearer(token)).get_json()["id"]
        for i in range(3)
    ]

    page = client.get("/api/groups?limit=2&page=1", headers=_bearer(token)).get_json()
    assert len(page["groups"]) == 2
    assert page["groups"][0]["creatorName"] == "owner"

    detail = client.get(f"/api/groups/{ids[0]}", headers=_bearer(token)).get_json()
    assert [m["role"] for m in detail["members"]] == ["admin"]

    deleted = client.delete(f"/api/groups/{ids[0]}", headers=_bearer(token))
    assert deleted.status_code == 200
    assert client.get(f"/api/groups/{ids[0]}", headers=_bearer(token)).status_code == 404
    session = SessionLocal()
    try:
        assert session.query(GroupMembership).filter_by(group_id=ids[0]).count() == 0
    finally:
        session.close()


def test_last_admin_cannot_leave(client) -> None:
    owner = _register(client, "owner@x.com")
    token = _login(client, "owner@x.com")
    group_id = client.post("/api/groups", json={"name": "Team"}, headers=_bearer(token)).get_json()[
        "id"
    ]

    response = client.delete(f"/api/groups/{group_id}/users/{owner['id']}", headers=_bearer(token))

    assert response.status_code == 409
    assert response.get_json()["error"] == "last_group_admin"


def test_preferences_round_trip(client) -> None:
    _register(client, "a@x.com")
    _register(client, "b@x.com")
    a = _login(client, "a@x.com")
    b = _login(client, "b@x.com")

    put = client.put("/api/preferences/theme", json={"value": "dark"}, headers=_bearer(a))
    assert put.status_code == 200
    assert put.get_json() == {"key": "theme", "value": "dark"}
    client.put("/api/preferences/theme", json={"value": "light"}, headers=_bearer(a))

    assert client.get("/api/preferences/theme", headers=_bearer(a)).get_json()["value"] == "light"
    assert client.get("/api/preferences", headers=_bearer(a)).get_json() == {
        "preferences": {"theme": "light"}
    }
    assert client.get("/api/preferences/theme", headers=_bearer(b)).status_code == 404

    assert client.delete("/api/preferences/theme", headers=_bearer(a)).status_code == 200
    second = client.delete("/api/preferences/theme", headers=_bearer(a))
    assert second.status_code == 404
    assert second.get_json()["error"] == "preference_not_found"

    too_big = client.put(
        "/api/preferences/blob", json={"value": "x" * 4097}, headers=_bearer(a)
    )
    assert too_big.status_code == 400


def test_purge_removes_expired_sessions(client) -> None:
    _register(client, "root@example.com", "rootpw")
    user = _register(client, "a@x.com")
    admin = _login(client, "root@example.com", "rootpw")
    sessions = SqlAlchemySessionRepository(SessionLocal)
    sessions.create(user["id"], "stale-token", utc_now() - timedelta(minutes=5))

    response = client.post("/api/admin/sessions/purge", headers=_bearer(admin))

    assert response.status_code == 200
    assert response.get_json() == {"removed": 1}
    assert sessions.find_active_by_token("stale-token") is None
    assert client.get("/api/auth/profile", headers=_bearer(admin)).status_code == 200


def test_expired_session_is_deleted_when_looked_up(client) -> None:
    user = _register(client, "a@x.com")
    sessions = SqlAlchemySessionRepository(SessionLocal)
    sessions.create(user["id"], "stale-token", utc_now() - timedelta(minutes=5))

    assert sessions.find_active_by_token("stale-token") is None
    assert sessions.purge_expired() == 0


def test_admin_flag_seeded_for_existing_accounts(client) -> None:
    users = SqlAlchemyUserRepository(SessionLocal)
    _register(client, "a@x.com")
    _register(client, "root@example.com", "rootpw")
    root = users.find_by_email("root@example.com")
    session = SessionLocal()
    try:
        session.query(User).filter_by(id=root.id).update({User.is_admin: False})
        session.commit()
    finally:
        session.close()

    assert setup_admin_users(users) == 1
    assert users.find_by_email("root@example.com").is_admin is True
    assert users.find_by_email("a@x.com").is_admin is False


def test_health_and_unknown_route(client) -> None:
    health = client.get("/health")
    assert health.status_code == 200
    body = health.get_json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"
    assert "timestamp" in body

    unknown = client.get("/api/nope")
    assert unknown.status_code == 404
    assert unknown.get_json() == {"error": "not_found"}


def test_purge_script(client) -> None:
    user = _register(client, "a@x.com")
    sessions = SqlAlchemySessionRepository(SessionLocal)
    sessions.create(user["id"], "old-1", utc_now() - timedelta(hours=1))
    sessions.create(user["id"], "old-2", utc_now() - timedelta(hours=2))
    live = _login(client, "a@x.com")

    assert purge_sessions.purge() == 2
    assert client.get("/api/auth/profile", headers=_bearer(live)).status_code == 200


def _exhausted_pool(*_args, **_kwargs):
    raise PoolTimeoutError("QueuePool limit of size 10 overflow 10 reached")


def test_pool_exhaustion_is_retryable_on_plain_route(client, monkeypatch) -> None:
    _register(client, "a@x.com")
    token = _login(client, "a@x.com")
    monkeypatch.setattr(SqlAlchemyGroupRepository, "list", _exhausted_pool)

    response = client.get("/api/groups", headers=_bearer(token))
    assert response.status_code == 503
    assert response.get_json() == {"error": "database_unavailable"}
    assert response.headers["Retry-After"] == "1"


def test_pool_exhaustion_is_retryable_on_group_guarded_route(client, monkeypatch) -> None:
    _register(client, "a@x.com")
    token = _login(client, "a@x.com")
    group_id = client.post("/api/groups", json={"name": "Team"}, headers=_bearer(token)).get_json()["id"]
    monkeypatch.setattr(SqlAlchemyGroupRepository, "find_by_id", _exhausted_pool)

    for response in (
        client.get(f"/api/groups/{group_id}/members", headers=_bearer(token)),
        client.delete(f"/api/groups/{group_id}", headers=_bearer(token)),
    ):
        assert response.status_code == 503
        assert response.get_json() == {"error": "database_unavailable"}
        assert response.headers["Retry-After"] == "1"
