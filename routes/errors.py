"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: routes/errors.py – преобразование ошибок в HTTP-ответы.

- MalformedIdentifier -> 400, TargetNotFound -> 404;
- AuthRequired / InvalidSession -> перенаправление на страницу входа;
- StorageFailure и ошибки SQLAlchemy -> 500 без внутренних подробностей, с записью в журнал;
- стандартные 400/404/405/413 отображаются той же страницей ошибки.
"""

from flask import current_app, render_template
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from errors import AuthRequired, MalformedIdentifier, StorageFailure, TargetNotFound
from extensions import db, login_manager

_NOT_FOUND_MESSAGES = {
    "post": "The post you're looking for doesn't exist.",
    "comment": "The comment you're looking for doesn't exist.",
    "category": "The category you're looking for doesn't exist.",
}


def render_error(status_code: int, title: str, message: str):
    """Страница ошибки с заданным статусом."""
    return (
        render_template("error.html", status_code=status_code, error_title=title, message=message),
        status_code,
    )


def register_error_handlers(app):
    @app.errorhandler(MalformedIdentifier)
    def handle_malformed_identifier(exc):
        return render_error(400, _("Bad Request"), exc.message)

    @app.errorhandler(TargetNotFound)
    def handle_target_not_found(exc):
        message = _NOT_FOUND_MESSAGES.get(exc.kind, "The requested resource doesn't exist.")
        return render_error(404, _("%(kind)s Not Found", kind=exc.kind.capitalize()), _(message))

    @app.errorhandler(AuthRequired)
    def handle_auth_required(exc):
        return login_manager.unauthorized()

    @app.errorhandler(StorageFailure)
    def handle_storage_failure(exc):
        db.session.rollback()
        current_app.logger.error("Ошибка хранилища: %s", exc.message, exc_info=exc.__cause__ or exc)
        return render_error(500, _("Internal Server Error"), _("Something went wrong. Please try again later."))

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        current_app.logger.exception("Непредвиденная ошибка базы данных")
        return render_error(500, _("Internal Server Error"), _("Something went wrong. Please try again later."))

    @app.errorhandler(400)
    @app.errorhandler(404)
    @app.errorhandler(405)
    @app.errorhandler(413)
    def handle_http_error(exc: HTTPException):
        response, status_code = render_error(exc.code, exc.name, exc.description)
        if exc.code == 405 and exc.valid_methods:
            return response, status_code, {"Allow": ", ".join(exc.valid_methods)}
        return response, status_code
