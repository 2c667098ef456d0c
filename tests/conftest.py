import itertools
import threading

import pytest

from app import create_app
from config import TestingConfig
from extensions import db
from models.comment import Comment
from models.category import Category
from models.post import Post
from services.users import create_user

STRONG_PASSWORD = "Secr3t!pass"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_app(tmp_path):
    """Приложение на файловой SQLite: у каждого потока своё подключение."""

    class FileConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'forum.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"timeout": 5}}

    app = create_app(FileConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def run_concurrently():
    """Запускает func в count потоках, каждый в своём контексте приложения."""

    def _run(app, func, count):
        results = [None] * count
        errors = []

        def worker(index):
            with app.app_context():
                try:
                    results[index] = func()
                except Exception as exc:
                    errors.append(exc)

        threads = [threading.Thread(target=worker, args=(index,)) for index in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert not errors, errors
        return results

    return _run


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    """Контекст приложения для тестов сервисов (без тестового клиента)."""
    with app.app_context():
        yield app


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make_user(username=None, email=None, password=STRONG_PASSWORD) -> int:
        username = username or f"user{next(counter)}"
        email = email or f"{username}@example.com"
        with app.app_context():
            return create_user(username, email, password).id

    return _make_user


@pytest.fixture
def make_post(app):
    def _make_post(user_id, title="Welcome to the forum", content="First post content here.", category_ids=(1,), is_pinned=False) -> int:
        with app.app_context():
            categories = Category.query.filter(Category.id.in_(category_ids)).all()
            post = Post(title=title, content=content, user_id=user_id, categories=categories, is_pinned=is_pinned)
            db.session.add(post)
            db.session.commit()
            return post.id

    return _make_post


@pytest.fixture
def make_comment(app):
    def _make_comment(user_id, post_id, content="Thanks for sharing this!") -> int:
        with app.app_context():
            comment = Comment(content=content, user_id=user_id, post_id=post_id)
            db.session.add(comment)
            db.session.commit()
            return comment.id

    return _make_comment


@pytest.fixture
def login():
    def _login(client, identifier, password=STRONG_PASSWORD, next_url=None):
        data = {"username": identifier, "password": password}
        if next_url is not None:
            data["next"] = next_url
        return client.post("/login", data=data)

    return _login


@pytest.fixture
def alice(make_user):
    return make_user("alice", "alice@example.com")


@pytest.fixture
def auth_client(client, alice, login):
    response = login(client, "alice")
    assert response.status_code == 303
    return client
