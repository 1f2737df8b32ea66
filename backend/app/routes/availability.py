"""
API роутер для недельных шаблонов и доступности
"""
import logging
from fastapi import APIRouter, Depends, Header, Query, Response
from pydantic import BaseModel
from typing import List, Optional

from ..database import AvailabilityStore, get_store
from ..models.developer import Developer
from ..services.booking import validate_date
from ..services.errors import StaleDocumentError
from ..services.schedule import ScheduleService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["availability"])


# ==================== Pydantic Schemas ====================

class AvailabilityReplace(BaseModel):
    """Полная замена шаблонов (брони сохраняются)"""
    developers: List[Developer]
    timezone: Optional[str] = None


class DeveloperCreate(BaseModel):
    name: Optional[str] = None


class DayTemplateUpdate(BaseModel):
    times: List[str] = []  # выбранные времена сетки, "HH:MM"


# ==================== API Endpoints ====================

@router.get("/availability")
def get_availability(response: Response, store: AvailabilityStore = Depends(get_store)):
    """Весь документ: шаблоны и брони"""
    document = store.load()
    response.headers["ETag"] = f'"{store.etag(document)}"'
    return document.to_json_dict()


@router.post("/availability")
def replace_availability(
    data: AvailabilityReplace,
    store: AvailabilityStore = Depends(get_store),
    if_match: Optional[str] = Header(None),
):
    """Заменить шаблоны разработчиков целиком"""
    with store.transaction() as document:
        if if_match and if_match.strip('"') != store.etag(document):
            logger.warning("Отклонена замена шаблонов: документ изменился")
            raise StaleDocumentError("Данные изменились, обновите страницу и повторите")

        ScheduleService(document).replace_templates(data.developers, data.timezone)

    logger.info(f"Шаблоны обновлены: {len(data.developers)} разработчик(ов)")
    return {"success": True, "message": "Availability updated successfully"}


@router.get("/availability/week")
def get_week(
    date_str: Optional[str] = Query(None, alias="date", description="Любая дата недели, YYYY-MM-DD"),
    developer_id: Optional[str] = Query(None, alias="developerId"),
    store: AvailabilityStore = Depends(get_store),
):
    """Слоты недели (Пн-Вс) со статусом доступности"""
    service = ScheduleService(store.load())

    if date_str:
        target_date = validate_date(date_str)
    else:
        target_date = service.today()

    return {
        "today": service.today().isoformat(),
        "days": service.get_week(target_date, developer_id),
    }


@router.get("/slots")
def get_booking_slots(store: AvailabilityStore = Depends(get_store)):
    """Фиксированные времена брони и их длительность"""
    service = ScheduleService(store.load())
    return [
        {"time": t, "durationMinutes": service.booking_slots[t]}
        for t in service.booking_times()
    ]


@router.post("/developers")
def create_developer(data: DeveloperCreate, store: AvailabilityStore = Depends(get_store)):
    """Добавить разработчика с пустым расписанием"""
    with store.transaction() as document:
        developer = ScheduleService(document).add_developer(data.name)

    logger.info(f"Добавлен разработчик {developer.id}")
    return {"success": True, "developer": developer.model_dump(by_alias=True)}


@router.get("/developers/{developer_id}/grid")
def get_template_grid(developer_id: str, store: AvailabilityStore = Depends(get_store)):
    """Сетка редактора шаблона"""
    return ScheduleService(store.load()).get_template_grid(developer_id)


@router.put("/developers/{developer_id}/availability/{day_of_week}")
def update_day_template(
    developer_id: str,
    day_of_week: int,
    data: DayTemplateUpdate,
    store: AvailabilityStore = Depends(get_store),
):
    """Заменить интервалы дня недели свёрткой выбранных времён"""
    with store.transaction() as document:
        day = ScheduleService(document).set_day_template(developer_id, day_of_week, data.times)

    logger.info(f"Шаблон {developer_id}, день {day_of_week}: {day['slots']}")
    return {"success": True, "day": day}
