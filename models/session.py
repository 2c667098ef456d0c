"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: models/session.py – сессии пользователей.

Строка сессии связывает непрозрачный токен с пользователем и абсолютным сроком
действия. У пользователя одновременно существует не более одной сессии.
"""

from datetime import datetime

from extensions import db


class UserSession(db.Model):
    """Класс `UserSession` описывает активную сессию входа."""
    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="sessions")
