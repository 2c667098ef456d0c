"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: app.py – фабрика приложения.

Назначение модуля:
- Сборка приложения Flask: конфигурация, расширения, маршруты, обработчики ошибок.
- CSRF-защита форм, заголовки безопасности, журнал запросов.
- Команда `flask purge-sessions` для удаления истёкших сессий.

Запуск: `flask --app app run` или `gunicorn "app:create_app()"`.
"""

import hmac
import os
import secrets
import time

import click
from flask import Flask, flash, g, redirect, request, session, url_for
from flask_babel import gettext as _

from config import Config
from extensions import db, login_manager, cors, babel
import models  # noqa: F401 - регистрирует модели для db.create_all()
import utils.auth_gate  # noqa: F401 - регистрирует request_loader Flask-Login
from models.category import seed_categories
from routes.auth import register_routes as register_auth_routes
from routes.forum import register_routes as register_forum_routes
from routes.api import register_routes as register_api_routes
from routes.errors import register_error_handlers
from services.sessions import purge_expired_sessions
from utils.paths import SegmentsConverter
from utils.rate_limit import SlidingWindowRateLimiter


def create_app(config_object=Config) -> Flask:
    """Фабрика приложения, собирающая все модули воедино."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Пустые сегменты пути (//) должны дойти до разбора идентификатора
    app.url_map.merge_slashes = False
    app.url_map.converters["segments"] = SegmentsConverter

    db.init_app(app)
    login_manager.init_app(app)
    login_manager.session_protection = None

    def select_locale() -> str:
        return app.config["DEFAULT_LANGUAGE"]

    def select_timezone() -> str:
        return app.config["DISPLAY_TIMEZONE"]

    babel.init_app(app, locale_selector=select_locale, timezone_selector=select_timezone)

    if app.config["CORS_ENABLED"]:
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        )

    app.extensions["rate_limiter"] = SlidingWindowRateLimiter()

    register_auth_routes(app)
    register_forum_routes(app)
    register_api_routes(app)
    register_error_handlers(app)

    with app.app_context():
        # Создаем отсутствующие таблицы (без изменения существующих колонок)
        db.create_all()
        if app.config["SEED_CATEGORIES"]:
            added = seed_categories()
            if added:
                app.logger.info("Добавлено категорий по умолчанию: %s", added)

    def _ensure_csrf_token() -> str:
        token = session.get("csrf_token")
        if not token:
            token = secrets.token_urlsafe(32)
            session["csrf_token"] = token
        return token

    def _is_csrf_valid() -> bool:
        expected = session.get("csrf_token")
        provided = request.headers.get("X-CSRF-Token") or request.form.get("csrf_token")
        if not expected or not provided:
            return False
        return hmac.compare_digest(expected, provided)

    @app.context_processor
    def inject_template_globals():
        return {"csrf_token": _ensure_csrf_token()}

    @app.before_request
    def start_request_timer():
        g.request_started = time.perf_counter()

    @app.before_request
    def enforce_csrf():
        """Отклоняет изменяющие запросы без действительного CSRF-токена."""
        if not app.config["CSRF_ENABLED"]:
            return None

        if request.method in {"GET", "HEAD", "OPTIONS", "TRACE"}:
            return None

        if _is_csrf_valid():
            return None

        app.logger.warning("Отклонён запрос без CSRF-токена: %s %s", request.method, request.path)
        flash(_("Form session expired. Please refresh the page and try again."), "error")
        return redirect(request.referrer or url_for("home"), code=303)

    @app.after_request
    def log_request(response):
        started = g.pop("request_started", None)
        duration_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        app.logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.after_request
    def apply_security_headers(response):
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "camera=(), microphone=(), geolocation=()")
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    @app.cli.command("purge-sessions")
    def purge_sessions_command():
        """Удаляет истёкшие сессии пользователей."""
        removed = purge_expired_sessions()
        click.echo(f"Removed {removed} expired session(s).")

    return app


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        # Очистка истёкших сессий при запуске приложения
        purge_expired_sessions()
    is_production = os.environ.get("FLASK_ENV", "").lower() == "production"
    app.run(debug=not is_production)
