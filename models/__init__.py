"""
Модуль: `models/__init__.py`.
Назначение: Импорт моделей для корректной регистрации в SQLAlchemy metadata.
"""

from .user import User
from .session import UserSession
from .category import Category, post_category
from .post import Post
from .comment import Comment
from .vote import PostVote, CommentVote

__all__ = ["User", "UserSession", "Category", "post_category", "Post", "Comment", "PostVote", "CommentVote"]
