"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: routes/api.py – JSON-маршруты.

Назначение модуля:
- Выдача счётчиков голосов поста и голоса текущего пользователя.
"""

from flask import jsonify

from extensions import db
from models.post import Post
from services.votes import POST, summarize_votes
from utils.auth_gate import optional_auth


def _api_error(message: str, status: int = 400):
    return jsonify({"success": False, "error": message}), status


def _vote_label(user_vote: bool | None) -> str | None:
    if user_vote is None:
        return None
    return "like" if user_vote else "dislike"


def register_routes(app):
    @app.get("/api/posts/<int(max=9223372036854775807):post_id>/votes")
    @optional_auth
    def post_votes(post_id: int, user):
        if db.session.get(Post, post_id) is None:
            return _api_error("Post not found", 404)

        summary = summarize_votes(POST, [post_id], user.id if user else None)[post_id]
        return jsonify(
            {
                "success": True,
                "likes": summary.likes,
                "dislikes": summary.dislikes,
                "user_vote": _vote_label(summary.user_vote),
            }
        )
