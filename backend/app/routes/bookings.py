"""
API роутер для бронирования слотов
"""
import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Optional

from ..database import AvailabilityStore, get_store
from ..services.booking import BookingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["bookings"])


# ==================== Pydantic Schemas ====================

# Формат проверяет BookingService, чтобы вернуть конкретную причину ошибки
class BookRequest(BaseModel):
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM
    client_name: Optional[str] = Field(None, alias="clientName")

    class Config:
        populate_by_name = True


class CancelRequest(BaseModel):
    date: Optional[str] = None
    time: Optional[str] = None


# ==================== API Endpoints ====================

@router.post("/book")
def book_slot(data: BookRequest, store: AvailabilityStore = Depends(get_store)):
    """Забронировать слот на имя клиента"""
    with store.transaction() as document:
        slot = BookingService(document).book(data.date, data.time, data.client_name)

    return {
        "success": True,
        "slot": slot.model_dump(by_alias=True, exclude_none=True),
    }


@router.post("/cancel")
def cancel_slot(data: CancelRequest, store: AvailabilityStore = Depends(get_store)):
    """Отменить бронь (запись удаляется)"""
    with store.transaction() as document:
        BookingService(document).cancel(data.date, data.time)

    return {"success": True, "message": "Бронь отменена"}
