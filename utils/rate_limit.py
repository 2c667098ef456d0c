"""
Модуль: `utils/rate_limit.py`.
Назначение: Ограничение частоты попыток входа и регистрации.
"""

import time
from collections import defaultdict, deque
from threading import Lock

from flask import current_app, request


class SlidingWindowRateLimiter:
    """In-memory ограничитель со скользящим окном; ключ – корзина и клиент."""

    def __init__(self):
        self._hits = defaultdict(deque)
        self._lock = Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Регистрирует попытку; False, если лимит окна уже исчерпан."""
        if limit <= 0 or window_seconds <= 0:
            return False

        now = time.monotonic()
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()

            if len(hits) >= limit:
                return False

            hits.append(now)
            return True


def client_address() -> str:
    """IP клиента с учётом X-Forwarded-For."""
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    first_ip = forwarded_for.split(",", 1)[0].strip()
    return first_ip or request.remote_addr or "unknown"


def is_rate_limited(bucket: str, limit: int, window_seconds: int, identity: str | None = None) -> bool:
    if not current_app.config.get("RATE_LIMIT_ENABLED", True):
        return False
    limiter = current_app.extensions.get("rate_limiter")
    if limiter is None:
        return False

    key = f"{bucket}:{identity or client_address()}"
    if limiter.hit(key, limit, window_seconds):
        return False
    current_app.logger.warning("Превышен лимит запросов: %s", bucket)
    return True
