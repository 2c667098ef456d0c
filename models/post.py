"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: models/post.py – модель поста.

Назначение модуля:
- Хранение заголовка, текста, автора и счётчика просмотров поста.
- Связь многие-ко-многим с категориями (от 1 до 5 на пост).
"""

from datetime import datetime

from extensions import db
from models.category import post_category


class Post(db.Model):
    """Класс `Post` описывает тему обсуждения."""
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    is_pinned = db.Column(db.Boolean, nullable=False, default=False)
    view_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    categories = db.relationship(
        "Category",
        secondary=post_category,
        lazy="selectin",
        order_by="Category.name",
    )
    comments = db.relationship(
        "Comment",
        backref="post",
        lazy=True,
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
    )
