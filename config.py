"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: config.py – конфигурация приложения.

Назначение модуля:
- Определение базовых параметров приложения Flask (секретный ключ, строка подключения к БД).
- Параметры сессий пользователей: имя cookie, время жизни, флаги безопасности.
- Часовой пояс отображения дат и прочие параметры окружения.
"""

import os
import warnings


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Преобразует переменную окружения в bool."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_int(name: str, default: int) -> int:
    """Преобразует переменную окружения в int."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str] | None = None) -> list[str]:
    """Преобразует переменную окружения вида 'a,b,c' в список."""
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


def _is_production() -> bool:
    """Определяет production-режим по FLASK_ENV."""
    return os.environ.get("FLASK_ENV", "").strip().lower() == "production"


def _engine_options(database_uri: str, busy_timeout: int) -> dict:
    """Параметры движка SQLAlchemy: ограничиваем ожидание блокировки БД."""
    if database_uri.startswith("sqlite"):
        return {"connect_args": {"timeout": busy_timeout}}
    return {"pool_pre_ping": True, "pool_timeout": busy_timeout}


class Config:
    """Базовая конфигурация приложения."""

    _PRODUCTION = _is_production()

    SECRET_KEY = os.environ.get("SECRET_KEY")
    if not SECRET_KEY:
        if _PRODUCTION:
            raise RuntimeError(
                "SECRET_KEY environment variable is required in production. "
                "Set a strong random value before starting the app."
            )
        SECRET_KEY = "dev-insecure-secret-key"
        warnings.warn(
            "SECRET_KEY is not set. Using insecure development fallback key.",
            RuntimeWarning,
            stacklevel=1,
        )

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:////app/instance/forum.db" if _PRODUCTION else "sqlite:///forum.db",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_BUSY_TIMEOUT_SECONDS = _get_env_int("DB_BUSY_TIMEOUT_SECONDS", 10)
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI, DB_BUSY_TIMEOUT_SECONDS)
    SEED_CATEGORIES = _get_env_bool("SEED_CATEGORIES", default=True)

    # Cookie сессии Flask используется только для CSRF-токена и flash-сообщений
    SESSION_COOKIE_SECURE = _get_env_bool("SESSION_COOKIE_SECURE", default=_PRODUCTION)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")

    # Непрозрачный токен сессии пользователя хранится в БД
    AUTH_COOKIE_NAME = os.environ.get("AUTH_COOKIE_NAME", "session_token").strip() or "session_token"
    AUTH_SESSION_LIFETIME_HOURS = _get_env_int("AUTH_SESSION_LIFETIME_HOURS", 24)
    AUTH_COOKIE_SECURE = SESSION_COOKIE_SECURE

    CSRF_ENABLED = _get_env_bool("CSRF_ENABLED", default=True)
    RATE_LIMIT_ENABLED = _get_env_bool("RATE_LIMIT_ENABLED", default=True)

    CORS_ENABLED = _get_env_bool("CORS_ENABLED", default=False)
    CORS_ORIGINS = _get_env_list(
        "CORS_ORIGINS",
        default=[
            "http://127.0.0.1:8080",
            "http://localhost:8080",
        ],
    )

    MAX_CONTENT_LENGTH = 1 * 1024 * 1024

    DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "en").strip().lower() or "en"
    DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "Asia/Almaty").strip() or "UTC"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


class TestingConfig(Config):
    """Конфигурация для автотестов: БД в памяти, CSRF отключён."""

    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options("sqlite://", 5)
    SESSION_COOKIE_SECURE = False
    AUTH_COOKIE_SECURE = False
    CSRF_ENABLED = False
    RATE_LIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"
