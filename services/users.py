"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: services/users.py – регистрация и проверка учётных данных.
"""

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from errors import StorageFailure, ValidationError
from extensions import db
from models.user import User


def create_user(username: str, email: str, password: str) -> User:
    """Создаёт пользователя; занятые имя или email дают ValidationError."""
    if User.query.filter_by(username=username).first():
        raise ValidationError("Username already exists", field="username")
    if User.query.filter_by(email=email).first():
        raise ValidationError("Email already exists", field="email")

    user = User(
        username=username,
        email=email,
        password_hash=generate_password_hash(password, method="scrypt"),
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Параллельная регистрация с теми же данными
        db.session.rollback()
        raise ValidationError("Username or email already exists") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageFailure("Error creating user") from exc
    return user


def authenticate_user(identifier: str, password: str) -> User | None:
    """Ищет пользователя по имени или email и сверяет пароль."""
    if not identifier or not password:
        return None

    user = User.query.filter(or_(User.username == identifier, User.email == identifier)).first()
    if user and check_password_hash(user.password_hash, password):
        return user
    return None
