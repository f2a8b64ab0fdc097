# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from userhub.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session; its transaction commits on clean exit and rolls back otherwise.

    Repositories open one scope per call, so every repository method is a
    single transaction. Errors raised by the commit itself also roll back.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except BaseException as exc:
        logger.debug(f"uow: rollback error={type(exc).__name__}")
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]
