"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: routes/auth.py – регистрация, вход и выход.

Назначение модуля:
- Регистрация новых пользователей с проверкой имени, email и сложности пароля.
- Вход по имени пользователя или email: выдача cookie `session_token`.
- Выход: отзыв сессии в хранилище и удаление cookie.
"""

from datetime import datetime, timedelta

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_babel import gettext as _

from errors import ValidationError
from extensions import login_manager
from services.sessions import create_session, destroy_session
from services.users import authenticate_user, create_user
from utils.auth_gate import session_token_from
from utils.rate_limit import is_rate_limited
from utils.validation import clean_text, validate_email, validate_password, validate_username


@login_manager.unauthorized_handler
def handle_unauthorized():
    flash(_("Please log in to continue."), "error")
    if request.method == "GET" and request.path != url_for("login"):
        next_url = request.full_path if request.query_string else request.path
        return redirect(url_for("login", next=next_url), code=303)
    return redirect(url_for("login"), code=303)


def _safe_next_url(candidate: str | None) -> str | None:
    """Разрешает только локальные пути, чтобы не было открытого редиректа."""
    if not candidate or not candidate.startswith("/") or candidate.startswith("//"):
        return None
    if "\\" in candidate:
        return None
    return candidate


def _set_session_cookie(response, token: str):
    lifetime = timedelta(hours=current_app.config["AUTH_SESSION_LIFETIME_HOURS"])
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        token,
        max_age=int(lifetime.total_seconds()),
        expires=datetime.utcnow() + lifetime,
        path="/",
        secure=current_app.config["AUTH_COOKIE_SECURE"],
        httponly=True,
        samesite="Lax",
    )
    return response


def _clear_session_cookie(response):
    response.delete_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        path="/",
        secure=current_app.config["AUTH_COOKIE_SECURE"],
        httponly=True,
        samesite="Lax",
    )
    return response


def _validate_registration(username: str, email: str, password: str, confirm_password: str) -> None:
    for validator, value, field in (
        (validate_username, username, "username"),
        (validate_email, email, "email"),
        (validate_password, password, "password"),
    ):
        ok, reason = validator(value)
        if not ok:
            raise ValidationError(reason, field=field)

    if password != confirm_password:
        raise ValidationError("Passwords do not match", field="confirm_password")


def register_routes(app):
    @app.route("/register", methods=["GET", "POST"])
    def register():
        if request.method == "GET":
            return render_template("register.html")

        # Имя очищается от опасных символов, но не обрезается: пробелы отклоняет проверка
        username = clean_text(request.form.get("username"))
        email = request.form.get("email") or ""
        password = request.form.get("password") or ""
        confirm_password = request.form.get("confirm_password") or ""

        def render_form(error: str):
            return render_template("register.html", error=error, username=username, email=email)

        if is_rate_limited("register", limit=10, window_seconds=15 * 60):
            return render_form(_("Too many registration attempts. Please try again in a few minutes.")), 429

        try:
            _validate_registration(username, email, password, confirm_password)
            user = create_user(username, email, password)
        except ValidationError as exc:
            return render_form(exc.message)

        current_app.logger.info("Зарегистрирован пользователь %s (ID: %s)", user.username, user.id)
        flash(_("Registration successful! Please log in."), "success")
        return redirect(url_for("login", registered=1), code=303)

    @app.route("/login", methods=["GET", "POST"])
    def login():
        next_url = _safe_next_url(request.values.get("next"))

        if request.method == "GET":
            return render_template("login.html", next_url=next_url)

        identifier = (request.form.get("username") or "").strip()
        password = request.form.get("password") or ""

        def render_form(error: str):
            return render_template("login.html", error=error, username=identifier, next_url=next_url)

        if is_rate_limited("login_ip", limit=20, window_seconds=10 * 60):
            return render_form(_("Too many login attempts. Please try again later.")), 429

        if is_rate_limited("login_user", limit=10, window_seconds=10 * 60, identity=identifier.lower() or "anonymous"):
            return render_form(_("Too many login attempts for this user. Please try again later.")), 429

        if not identifier or not password:
            return render_form(_("Please enter your username and password."))

        user = authenticate_user(identifier, password)
        if user is None:
            current_app.logger.info("Неудачная попытка входа: %s", identifier)
            return render_form(_("Invalid username or password"))

        token = create_session(user.id)
        current_app.logger.info("Вход выполнен: %s (ID: %s)", user.username, user.id)

        response = redirect(next_url or url_for("home"), code=303)
        return _set_session_cookie(response, token)

    @app.route("/logout", methods=["GET", "POST"])
    def logout():
        destroy_session(session_token_from(request))
        flash(_("You have been logged out."), "info")
        return _clear_session_cookie(redirect(url_for("home"), code=303))
