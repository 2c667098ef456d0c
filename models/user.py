"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: models/user.py – модель пользователя форума.

Назначение модуля:
- Описание ORM-модели User: уникальные имя и email, хеш пароля, признак администратора.
- Связи с сессиями, постами и комментариями пользователя.
"""

import uuid
from datetime import datetime

from flask_login import UserMixin
from extensions import db


class User(UserMixin, db.Model):
    """Класс `User` описывает зарегистрированного участника форума."""
    id = db.Column(db.Integer, primary_key=True)
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    sessions = db.relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    posts = db.relationship("Post", backref="author", lazy=True)
    comments = db.relationship("Comment", backref="author", lazy=True)
