"""
Ошибки каталога и их отображение на HTTP статусы

Все ошибки, которые видит клиент, наследуются от CatalogError и
сериализуются обработчиком в main.py как {"error": message}.
"""

from sqlalchemy.exc import IntegrityError


class CatalogError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Некорректные, отсутствующие или выходящие за границы входные данные"""
    status_code = 400
    message = "Invalid request"


class NotFoundError(CatalogError):
    status_code = 404
    message = "Resource not found"


class ConflictError(CatalogError):
    """Нарушение уникальности (например, повторный email)"""
    status_code = 409
    message = "Resource already exists"


class InvalidReferenceError(CatalogError):
    """Книга ссылается на несуществующего автора"""
    status_code = 422
    message = "Referenced author does not exist"


class InternalError(CatalogError):
    # Сообщение всегда общее, детали только в логах
    status_code = 500
    message = "Internal server error"

    def __init__(self):
        super().__init__()


# PostgreSQL SQLSTATE
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def classify_integrity_error(exc: IntegrityError, conflict_message: str = None) -> CatalogError:
    """
    Преобразует IntegrityError драйвера в ошибку каталога

    Для psycopg2 смотрим pgcode, для SQLite - текст сообщения.
    Все неизвестные нарушения становятся InternalError.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None)
    text = str(orig).lower() if orig is not None else str(exc).lower()

    if code == UNIQUE_VIOLATION or "unique constraint failed" in text:
        return ConflictError(conflict_message)
    if code == FOREIGN_KEY_VIOLATION or "foreign key constraint failed" in text:
        return InvalidReferenceError()
    return InternalError()
