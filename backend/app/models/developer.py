"""
Модель недельного шаблона доступности разработчика
"""
import re
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

DAY_NAMES = ["Пн", "Вт", "Ср", "Чт", "Пт", "Сб", "Вс"]


class TimeRange(BaseModel):
    """Открытый интервал [start, end) внутри дня"""

    start: str = Field(..., pattern=TIME_PATTERN)
    end: str = Field(..., pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError(f"Начало интервала {self.start} должно быть раньше конца {self.end}")
        return self


class DayAvailability(BaseModel):
    """Интервалы доступности на день недели (1=Пн, 7=Вс)"""

    day_of_week: int = Field(..., alias="dayOfWeek", ge=1, le=7)
    slots: List[TimeRange] = []

    class Config:
        populate_by_name = True


class Developer(BaseModel):
    """Разработчик и его повторяющееся недельное расписание"""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    availability: List[DayAvailability] = []

    @field_validator("availability")
    @classmethod
    def unique_days(cls, value: List[DayAvailability]) -> List[DayAvailability]:
        days = [day.day_of_week for day in value]
        if len(days) != len(set(days)):
            raise ValueError("День недели указан в шаблоне несколько раз")
        return value

    def day(self, day_of_week: int) -> List[TimeRange]:
        """Интервалы на день недели (пустой список, если день закрыт)"""
        for entry in self.availability:
            if entry.day_of_week == day_of_week:
                return entry.slots
        return []


def developer_id_from_name(name: str) -> str:
    """Идентификатор из имени: нижний регистр, пробелы -> дефис"""
    return re.sub(r"\s+", "-", name.strip().lower())


# Шаблон по умолчанию для инициализации хранилища
DEFAULT_WORKDAY_SLOTS = [
    {"start": "10:30", "end": "12:30"},
    {"start": "14:00", "end": "18:30"},
]

DEFAULT_DEVELOPER = {
    "id": "daniel",
    "name": "Daniel",
    "availability": [
        {"dayOfWeek": 1, "slots": DEFAULT_WORKDAY_SLOTS},  # Пн
        {"dayOfWeek": 2, "slots": DEFAULT_WORKDAY_SLOTS},  # Вт
        {"dayOfWeek": 3, "slots": DEFAULT_WORKDAY_SLOTS},  # Ср
        {"dayOfWeek": 4, "slots": DEFAULT_WORKDAY_SLOTS},  # Чт
        {"dayOfWeek": 5, "slots": DEFAULT_WORKDAY_SLOTS},  # Пт
    ],
}
