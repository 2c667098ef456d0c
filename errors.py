"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: errors.py – иерархия прикладных ошибок.

Каждая ошибка несёт сообщение, которое безопасно показать пользователю.
Преобразование ошибок в HTTP-ответы выполняется в routes/errors.py.
"""


class ForumError(Exception):
    """Базовая ошибка приложения."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ForumError):
    """Поле формы не прошло проверку; форма отображается повторно."""

    status_code = 200

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class AuthRequired(ForumError):
    """Действие требует входа в систему."""

    status_code = 303

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class InvalidSession(AuthRequired):
    """Токен сессии отсутствует в хранилище или истёк."""

    def __init__(self, message: str = "Invalid or expired session"):
        super().__init__(message)


class MalformedIdentifier(ForumError):
    """Идентификатор в пути запроса отсутствует или имеет неверный формат."""

    status_code = 400


class TargetNotFound(ForumError):
    """Пост, комментарий или категория с указанным идентификатором не существует."""

    status_code = 404

    def __init__(self, kind: str, target_id: int | str):
        super().__init__(f"{kind.capitalize()} {target_id} not found")
        self.kind = kind
        self.target_id = target_id


class StorageFailure(ForumError):
    """Непредвиденная ошибка хранилища."""

    status_code = 500
