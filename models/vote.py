"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: models/vote.py – голоса «нравится / не нравится».

Наличие строки означает, что пользователь проголосовал; отсутствие – что не голосовал.
Уникальный ключ (user_id, цель) гарантирует не более одной строки на пару.
"""

from datetime import datetime

from extensions import db


class PostVote(db.Model):
    """Класс `PostVote` описывает голос пользователя за пост."""
    __table_args__ = (db.UniqueConstraint("user_id", "post_id", name="uq_post_vote_user_post"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = db.Column(db.Integer, db.ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True)
    is_like = db.Column(db.Boolean, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class CommentVote(db.Model):
    """Класс `CommentVote` описывает голос пользователя за комментарий."""
    __table_args__ = (db.UniqueConstraint("user_id", "comment_id", name="uq_comment_vote_user_comment"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    comment_id = db.Column(
        db.Integer,
        db.ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_like = db.Column(db.Boolean, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
