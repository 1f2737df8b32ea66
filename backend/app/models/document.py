"""
Модель документа хранилища (весь JSON-файл целиком)
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .developer import Developer, DEFAULT_DEVELOPER
from .slot import BookedSlot


class AvailabilityDocument(BaseModel):
    """
    Единый документ: шаблоны разработчиков + конкретные брони.
    Файл со старой схемой (только slots или только developers)
    загружается с пустой недостающей секцией.
    """

    timezone: Optional[str] = None
    developers: List[Developer] = []
    slots: List[BookedSlot] = []

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Неизвестный часовой пояс: {value}")
        return value

    @field_validator("slots")
    @classmethod
    def unique_slots(cls, value: List[BookedSlot]) -> List[BookedSlot]:
        keys = [(slot.date, slot.time) for slot in value]
        if len(keys) != len(set(keys)):
            raise ValueError("Несколько записей на одну пару (дата, время)")
        return value

    def to_json_dict(self) -> dict:
        """Представление для записи на диск и ответа API"""
        return self.model_dump(by_alias=True, exclude_none=True)

    def find_slot(self, date: str, time: str) -> Optional[BookedSlot]:
        for slot in self.slots:
            if slot.date == date and slot.time == time:
                return slot
        return None

    def find_developer(self, developer_id: str) -> Optional[Developer]:
        for developer in self.developers:
            if developer.id == developer_id:
                return developer
        return None


def default_document(timezone: str) -> AvailabilityDocument:
    """Документ для первого запуска: шаблон по умолчанию и пустой список броней"""
    return AvailabilityDocument(
        timezone=timezone,
        developers=[Developer.model_validate(DEFAULT_DEVELOPER)],
        slots=[],
    )
