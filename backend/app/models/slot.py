"""
Модель забронированного слота
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional


class BookedSlot(BaseModel):
    """Запись о брони на пару (дата, время)"""

    date: str  # "YYYY-MM-DD"
    time: str  # "HH:MM"
    booked: bool = True
    client_name: Optional[str] = Field(None, alias="clientName")
    booked_at: Optional[str] = Field(None, alias="bookedAt")  # ISO-8601 UTC

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_booking_fields(self):
        # clientName и bookedAt есть тогда и только тогда, когда booked
        if self.booked and not (self.client_name and self.booked_at):
            raise ValueError(f"Бронь {self.date} {self.time} без clientName/bookedAt")
        if not self.booked and (self.client_name is not None or self.booked_at is not None):
            raise ValueError(f"Свободный слот {self.date} {self.time} с данными клиента")
        return self

    def __repr__(self):
        status = "✅" if self.booked else "—"
        return f"<BookedSlot {self.date} {self.time} {self.client_name or ''} {status}>"
