"""
Сервис бронирования: проверка запроса и переход состояния слота
Работает только с документом в памяти, сохранение делает вызывающий код
"""
import logging
import re
from datetime import date, datetime, timezone
from typing import Optional

from ..config import get_settings
from ..models.document import AvailabilityDocument
from ..models.slot import BookedSlot
from .errors import ConflictError, NotFoundError, ValidationError

settings = get_settings()
logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Всё, кроме латиницы, цифр, пробелов, дефиса и букв с диакритикой
NAME_DISALLOWED = re.compile(
    r"[^a-zA-Z0-9\s\-"
    r"áéíóúÁÉÍÓÚàèìòùÀÈÌÒÙâêîôûÂÊÎÔÛäëïöüÄËÏÖÜãõÃÕñÑçÇ]"
)


def sanitize_client_name(raw: str, max_length: Optional[int] = None) -> str:
    """
    Очистка имени клиента: убрать < и >, убрать недопустимые символы,
    обрезать пробелы и длину. Повторный вызов ничего не меняет.
    """
    if max_length is None:
        max_length = settings.CLIENT_NAME_MAX_LENGTH

    name = raw.replace("<", "").replace(">", "")
    name = NAME_DISALLOWED.sub("", name).strip()
    return name[:max_length].strip()


def validate_date(value: Optional[str]) -> date:
    if not value or not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValidationError("Неверный формат даты. Используйте YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Несуществующая дата: {value}")


def validate_time(value: Optional[str]) -> str:
    if not value or value not in settings.BOOKING_SLOTS:
        allowed = ", ".join(sorted(settings.BOOKING_SLOTS))
        raise ValidationError(f"Недопустимое время. Доступно: {allowed}")
    return value


def validate_client_name(raw: Optional[str]) -> str:
    """Вернуть очищенное имя или ValidationError с причиной"""
    if raw is None or not isinstance(raw, str) or not raw.strip():
        raise ValidationError("Укажите имя клиента")

    name = sanitize_client_name(raw)
    if len(name) < settings.CLIENT_NAME_MIN_LENGTH:
        raise ValidationError(
            f"Имя слишком короткое (минимум {settings.CLIENT_NAME_MIN_LENGTH} символа)"
        )
    return name


class BookingService:
    """Бронирование и отмена слотов в документе"""

    def __init__(self, document: AvailabilityDocument):
        self.document = document

    def book(
        self,
        date_str: Optional[str],
        time_str: Optional[str],
        client_name: Optional[str],
        now: Optional[datetime] = None
    ) -> BookedSlot:
        """
        Забронировать слот.
        Все проверки выполняются до изменения документа.
        """
        validate_date(date_str)
        validate_time(time_str)
        name = validate_client_name(client_name)

        existing = self.document.find_slot(date_str, time_str)
        if existing and existing.booked:
            logger.warning(f"Слот {date_str} {time_str} уже забронирован")
            raise ConflictError("Этот слот уже забронирован")

        if now is None:
            now = datetime.now(timezone.utc)

        slot = BookedSlot(
            date=date_str,
            time=time_str,
            booked=True,
            client_name=name,
            booked_at=now.isoformat(),
        )

        if existing:
            # Старая запись booked=false перезаписывается на месте
            self.document.slots[self.document.slots.index(existing)] = slot
        else:
            self.document.slots.append(slot)

        logger.info(f"Бронь: {date_str} {time_str} - {name}")
        return slot

    def cancel(self, date_str: Optional[str], time_str: Optional[str]) -> None:
        """
        Отменить бронь: запись удаляется из документа целиком
        """
        validate_date(date_str)
        validate_time(time_str)

        existing = self.document.find_slot(date_str, time_str)
        if not existing or not existing.booked:
            logger.warning(f"Нет брони для отмены: {date_str} {time_str}")
            raise NotFoundError("Бронь на это время не найдена")

        self.document.slots = [
            slot for slot in self.document.slots
            if not (slot.date == date_str and slot.time == time_str)
        ]
        logger.info(f"Отмена брони: {date_str} {time_str}")
