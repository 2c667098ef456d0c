"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: models/comment.py – модель комментария к посту.
"""

from datetime import datetime

from extensions import db


class Comment(db.Model):
    """Класс `Comment` описывает ответ пользователя в теме."""
    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    post_id = db.Column(db.Integer, db.ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True)
    # Ответ на другой комментарий (вложенные ответы пока не отображаются)
    parent_id = db.Column(db.Integer, db.ForeignKey("comment.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
