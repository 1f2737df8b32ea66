"""
Ошибки бронирования и хранилища
Каждая ошибка знает свой HTTP-код, обработчик в main.py отдаёт {"error": message}
"""


class BookingError(Exception):
    """Базовая ошибка"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Неверный формат даты/времени/имени или шаблона"""

    status_code = 400


class NotFoundError(BookingError):
    """Нет брони для отмены или неизвестный разработчик"""

    status_code = 404


class ConflictError(BookingError):
    """Слот уже забронирован или разработчик уже существует"""

    status_code = 409


class StaleDocumentError(BookingError):
    """If-Match не совпадает с текущей версией документа"""

    status_code = 412


class PersistenceError(BookingError):
    """Ошибка чтения/записи файла хранилища"""

    status_code = 500
