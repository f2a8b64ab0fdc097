from __future__ import annotations

import os
import tempfile

# Configuration is read once at import time, so the environment has to be in
# place before anything under userhub is imported.
_TMP = tempfile.mkdtemp(prefix="userhub-tests-")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'userhub-test.db')}"
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["LOG_FILE"] = os.path.join(_TMP, "app.log")
os.environ["ADMIN_EMAILS"] = "root@example.com"

import pytest  # noqa: E402


@pytest.fixture()
def reset_database():
    from userhub.infrastructure.db import ENGINE, Base, SessionLocal, init_db

    SessionLocal.remove()
    init_db()
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    SessionLocal.remove()
    Base.metadata.drop_all(bind=ENGINE)
