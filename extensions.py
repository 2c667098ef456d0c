"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: extensions.py – экземпляры Flask-расширений.

Расширения создаются без приложения и инициализируются в фабрике create_app():
- db – доступ к реляционному хранилищу (Flask-SQLAlchemy);
- login_manager – определение пользователя запроса по токену сессии (Flask-Login);
- cors – CORS для JSON-маршрутов /api/*;
- babel – каталог сообщений и локализация дат.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_babel import Babel

db = SQLAlchemy()
login_manager = LoginManager()
cors = CORS()
babel = Babel()
