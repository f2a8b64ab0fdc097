# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from userhub.shared.config import load_config
from userhub.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") in {"sqlite:", "sqlite:/"})


def build_engine(
    url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 10,
    pool_timeout: float = 2.0,
) -> Engine:
    connect_args: dict[str, object] = {}
    pool_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": max(int(pool_timeout), 1)}
    if not _is_memory_sqlite(url):
        # Bounded pool: checkout waits pool_timeout seconds, then raises TimeoutError.
        pool_args = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
        }

    engine = create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
        **pool_args,
    )

    if url.startswith("sqlite"):

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> scoped_session[Session]:
    return scoped_session(
        sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    )


ENGINE: Engine = build_engine(
    _config.database.url,
    pool_size=_config.database.pool_size,
    max_overflow=_config.database.max_overflow,
    pool_timeout=_config.database.pool_timeout,
)

SessionLocal = make_session_factory(ENGINE)


def init_db(engine: Engine | None = None) -> None:
    # models must be imported so their tables are registered on Base.metadata
    from userhub.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine or ENGINE)
    logger.info("Database schema ensured")
