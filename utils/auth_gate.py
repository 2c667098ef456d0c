"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: utils/auth_gate.py – определение пользователя запроса.

Назначение модуля:
- Загрузка пользователя по cookie `session_token` через Flask-Login (request_loader).
- Необязательный режим: при отсутствии или недействительности токена запрос
  обрабатывается анонимно.
- Обязательный режим: без пользователя обработчик не вызывается, выполняется
  перенаправление на страницу входа.

Пользователь передаётся обработчикам явно, аргументом `user`.
Модуль только читает сессии и не изменяет их.
"""

from functools import wraps

from flask import current_app
from flask_login import current_user

from errors import AuthRequired, InvalidSession
from extensions import login_manager
from models.user import User
from services.sessions import resolve_session


def session_token_from(request) -> str | None:
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"]) or None


@login_manager.request_loader
def load_user_from_session_cookie(request):
    token = session_token_from(request)
    if token is None:
        return None
    try:
        return resolve_session(token)
    except InvalidSession:
        return None


def optional_identity() -> User | None:
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def require_identity() -> User:
    user = optional_identity()
    if user is None:
        raise AuthRequired()
    return user


def optional_auth(view):
    """Передаёт в обработчик пользователя или None."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(*args, user=optional_identity(), **kwargs)

    return wrapper


def require_auth(view):
    """Пропускает запрос к обработчику только с действующей сессией."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(*args, user=require_identity(), **kwargs)

    return wrapper
