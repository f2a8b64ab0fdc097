# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client sliding-window throttling for the unauthenticated auth endpoints."""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from threading import Lock

from flask import jsonify, request

from userhub.shared.config import load_config
from userhub.shared.logging import logger


class SlidingWindowLimiter:
    """Allow ``limit`` hits per key in any ``window_seconds`` span.

    Keys whose window has emptied are dropped, at the latest one window after
    their last hit.
    """

    def __init__(self, limit: int, window_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def _evict(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.window:
            return
        self._last_sweep = now
        for key in list(self._hits):
            self._evict(self._hits[key], now)
            if not self._hits[key]:
                del self._hits[key]

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            self._evict(hits, now)
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str) -> int:
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0
            return max(1, math.ceil(self.window - (self._clock() - hits[0])))


def _client_address() -> str:
    # Behind trusted proxies ProxyFix has already rewritten remote_addr.
    return request.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    security = load_config().security
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not security.enable_rate_limit:
            return view

        @wraps(view)
        def wrapper(*args, **kwargs):
            key = f"{request.endpoint}:{_client_address()}"
            if limiter.allow(key):
                return view(*args, **kwargs)
            logger.warning(f"rate_limit: rejected endpoint={request.endpoint}")
            response = jsonify({"error": "rate_limited"})
            response.headers["Retry-After"] = str(limiter.retry_after(key))
            return response, 429

        return wrapper

    return decorator


__all__ = ["SlidingWindowLimiter", "rate_limit"]
