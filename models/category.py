"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: models/category.py – справочник категорий и связь постов с категориями.

Категории создаются системой при запуске и пользователями не редактируются.
"""

from datetime import datetime

from extensions import db

post_category = db.Table(
    "post_category",
    db.Column("post_id", db.Integer, db.ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    db.Column("category_id", db.Integer, db.ForeignKey("category.id", ondelete="CASCADE"), primary_key=True),
)

DEFAULT_CATEGORIES = (
    (1, "General Discussion", "General topics and discussions", "general"),
    (2, "Tech Talk", "Technology and programming discussions", "tech"),
    (3, "Announcements", "Important announcements", "announcements"),
    (4, "Help & Support", "Get help and support from the community", "help-support"),
    (5, "Off-Topic", "Casual discussions and off-topic conversations", "off-topic"),
)


class Category(db.Model):
    """Класс `Category` описывает раздел форума."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    slug = db.Column(db.String(100), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


def seed_categories() -> int:
    """Создаёт отсутствующие категории по умолчанию, возвращает число добавленных."""
    existing_ids = {row.id for row in db.session.query(Category.id).all()}
    added = 0
    for category_id, name, description, slug in DEFAULT_CATEGORIES:
        if category_id in existing_ids:
            continue
        db.session.add(Category(id=category_id, name=name, description=description, slug=slug))
        added += 1
    if added:
        db.session.commit()
    return added
