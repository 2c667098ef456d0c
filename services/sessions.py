"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: services/sessions.py – выдача, проверка и отзыв сессий.

Назначение модуля:
- Создание сессии со случайным непрозрачным токеном (256 бит, URL-safe).
- У пользователя одновременно существует одна сессия: новый вход отзывает все прежние.
- Поиск пользователя по действующему токену, выход из системы, очистка истёкших сессий.
"""

import secrets
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from errors import InvalidSession, StorageFailure
from extensions import db
from models.session import UserSession
from models.user import User
from services.transactions import begin_write_transaction

TOKEN_BYTES = 32


def _session_lifetime() -> timedelta:
    hours = int(current_app.config.get("AUTH_SESSION_LIFETIME_HOURS", 24))
    return timedelta(hours=max(1, hours))


def _token_preview(token: str) -> str:
    return token[:8] + "..." if len(token) > 8 else token


def create_session(user_id: int) -> str:
    """Создаёт новую сессию пользователя, удаляя все существующие.

    Удаление и вставка выполняются в одной транзакции. Строка пользователя
    блокируется (SELECT ... FOR UPDATE), поэтому параллельные входы одного
    пользователя выполняются последовательно; в SQLite ту же роль играет
    BEGIN IMMEDIATE.
    """
    token = secrets.token_urlsafe(TOKEN_BYTES)
    now = datetime.utcnow()

    try:
        begin_write_transaction()
        db.session.query(User.id).filter(User.id == user_id).with_for_update().first()
        revoked = UserSession.query.filter_by(user_id=user_id).delete(synchronize_session=False)
        db.session.add(
            UserSession(
                token=token,
                user_id=user_id,
                expires_at=now + _session_lifetime(),
                created_at=now,
            )
        )
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Не удалось создать сессию пользователя %s", user_id)
        raise StorageFailure("Error creating session") from exc

    if revoked:
        current_app.logger.info("Отозвано предыдущих сессий пользователя %s: %s", user_id, revoked)
    return token


def resolve_session(token: str | None) -> User:
    """Возвращает пользователя действующей сессии или поднимает InvalidSession."""
    if not token:
        raise InvalidSession()

    row = (
        UserSession.query.join(User, UserSession.user_id == User.id)
        .filter(UserSession.token == token, UserSession.expires_at > datetime.utcnow())
        .first()
    )
    if row is None:
        current_app.logger.warning("Недействительный токен сессии: %s", _token_preview(token))
        raise InvalidSession()
    return row.user


def destroy_session(token: str | None) -> None:
    """Удаляет сессию по токену; отсутствие сессии ошибкой не считается."""
    if not token:
        return

    try:
        UserSession.query.filter_by(token=token).delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageFailure("Error removing session") from exc


def purge_expired_sessions() -> int:
    """Удаляет истёкшие сессии. Для корректности не обязательна: истечение проверяется при поиске."""
    try:
        removed = UserSession.query.filter(
            UserSession.expires_at <= datetime.utcnow()
        ).delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Не удалось удалить истёкшие сессии")
        raise StorageFailure("Error purging expired sessions") from exc

    if removed:
        current_app.logger.info("Удалено истёкших сессий: %s", removed)
    return removed
