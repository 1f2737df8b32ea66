"""
Сервис для работы с расписанием и слотами
Недельный шаблон разработчика -> доступные слоты конкретной недели
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import get_settings
from ..models.developer import DAY_NAMES, DayAvailability, Developer, TimeRange, developer_id_from_name
from ..models.document import AvailabilityDocument
from .errors import ConflictError, NotFoundError, ValidationError

settings = get_settings()


def time_to_minutes(value: str) -> int:
    """Время "HH:MM" -> минуты от полуночи"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Минуты от полуночи -> время в формате HH:MM"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_time_open(ranges: Iterable[TimeRange], value: str) -> bool:
    """Время внутри одного из интервалов (start <= t < end)"""
    t = time_to_minutes(value)
    return any(
        time_to_minutes(r.start) <= t < time_to_minutes(r.end)
        for r in ranges
    )


def collapse_times_to_ranges(times: Iterable[str], slot_minutes: int = 30) -> List[dict]:
    """
    Свернуть отдельные выбранные времена в минимальный набор
    непрерывных интервалов. Каждое время занимает slot_minutes.
    Следующее время сливается с интервалом только если его начало
    точно равно концу интервала.
    """
    ranges = []
    range_start = None
    range_end = None

    for minutes in sorted({time_to_minutes(t) for t in times}):
        if range_start is None:
            range_start, range_end = minutes, minutes + slot_minutes
        elif minutes == range_end:
            range_end = minutes + slot_minutes
        else:
            ranges.append({"start": minutes_to_time(range_start), "end": minutes_to_time(range_end)})
            range_start, range_end = minutes, minutes + slot_minutes

    if range_start is not None:
        ranges.append({"start": minutes_to_time(range_start), "end": minutes_to_time(range_end)})

    return ranges


class ScheduleService:
    """Сервис управления расписанием"""

    def __init__(self, document: AvailabilityDocument):
        self.document = document
        self.booking_slots: Dict[str, int] = settings.BOOKING_SLOTS
        self.slot_duration = settings.TEMPLATE_SLOT_MINUTES

    def today(self) -> date:
        """Текущая дата в часовом поясе календаря"""
        zone = ZoneInfo(self.document.timezone or settings.TIMEZONE)
        return datetime.now(zone).date()

    def booking_times(self) -> List[str]:
        """Фиксированные времена брони по порядку"""
        return sorted(self.booking_slots, key=time_to_minutes)

    def template_times(self) -> List[str]:
        """
        Сетка редактора шаблона (по умолчанию 09:00 - 19:00 с шагом 30 минут)
        """
        start = time_to_minutes(settings.TEMPLATE_DAY_START)
        end = time_to_minutes(settings.TEMPLATE_DAY_END)
        return [minutes_to_time(m) for m in range(start, end + 1, self.slot_duration)]

    def get_developer(self, developer_id: Optional[str] = None) -> Optional[Developer]:
        """
        Разработчик по id, либо первый в документе.
        None если в документе нет шаблонов (только брони).
        """
        if developer_id:
            developer = self.document.find_developer(developer_id)
            if not developer:
                raise NotFoundError(f"Разработчик '{developer_id}' не найден")
            return developer

        if self.document.developers:
            return self.document.developers[0]
        return None

    def is_booked(self, target_date: date, slot_time: str) -> bool:
        slot = self.document.find_slot(target_date.isoformat(), slot_time)
        return bool(slot and slot.booked)

    def is_slot_available(
        self,
        target_date: date,
        slot_time: str,
        developer: Optional[Developer] = None,
        today: Optional[date] = None
    ) -> bool:
        """
        Проверить, доступен ли конкретный слот:
        не занят, дата не в прошлом, время попадает в шаблон
        """
        if today is None:
            today = self.today()

        # Прошедшие даты никогда не предлагаются
        if target_date < today:
            return False

        if self.is_booked(target_date, slot_time):
            return False

        if developer is not None:
            return is_time_open(developer.day(target_date.isoweekday()), slot_time)

        return True

    def get_week(
        self,
        target_date: date,
        developer_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> List[dict]:
        """
        Неделя (Пн-Вс), содержащая target_date, со статусом каждого слота
        """
        if today is None:
            today = self.today()

        developer = self.get_developer(developer_id)
        monday = target_date - timedelta(days=target_date.weekday())

        week = []
        for offset in range(7):
            day = monday + timedelta(days=offset)
            ranges = developer.day(day.isoweekday()) if developer else None

            slots = []
            for slot_time in self.booking_times():
                slots.append({
                    "time": slot_time,
                    "durationMinutes": self.booking_slots[slot_time],
                    "booked": self.is_booked(day, slot_time),
                    "past": day < today,
                    "inTemplate": True if ranges is None else is_time_open(ranges, slot_time),
                    "available": self.is_slot_available(day, slot_time, developer, today),
                })

            week.append({
                "date": day.isoformat(),
                "dayOfWeek": day.isoweekday(),
                "dayName": DAY_NAMES[day.weekday()],
                "slots": slots,
            })

        return week

    def get_template_grid(self, developer_id: str) -> List[dict]:
        """
        Сетка редактора: для каждого дня недели (1-7) и каждого времени
        сетки - открыто ли оно в шаблоне разработчика
        """
        developer = self.get_developer(developer_id)
        if developer is None:
            raise NotFoundError("Нет ни одного разработчика")
        times = self.template_times()

        return [
            {
                "dayOfWeek": day_num,
                "dayName": DAY_NAMES[day_num - 1],
                "slots": [
                    {"time": t, "open": is_time_open(developer.day(day_num), t)}
                    for t in times
                ],
            }
            for day_num in range(1, 8)
        ]

    def set_day_template(self, developer_id: str, day_of_week: int, times: List[str]) -> dict:
        """
        Заменить интервалы одного дня недели свёрткой выбранных времён
        """
        if not 1 <= day_of_week <= 7:
            raise ValidationError("День недели должен быть от 1 (Пн) до 7 (Вс)")

        grid = set(self.template_times())
        unknown = [t for t in times if t not in grid]
        if unknown:
            raise ValidationError(f"Время вне сетки расписания: {', '.join(sorted(set(unknown)))}")

        developer = self.get_developer(developer_id)
        if developer is None:
            raise NotFoundError("Нет ни одного разработчика")
        ranges = [TimeRange(**r) for r in collapse_times_to_ranges(times, self.slot_duration)]

        for entry in developer.availability:
            if entry.day_of_week == day_of_week:
                entry.slots = ranges
                break
        else:
            developer.availability.append(DayAvailability(day_of_week=day_of_week, slots=ranges))
            developer.availability.sort(key=lambda entry: entry.day_of_week)

        return {
            "dayOfWeek": day_of_week,
            "slots": [r.model_dump() for r in ranges],
        }

    def add_developer(self, name: Optional[str]) -> Developer:
        """
        Добавить разработчика с пустым шаблоном.
        id - имя в нижнем регистре, пробелы заменены дефисом.
        """
        if not name or not name.strip():
            raise ValidationError("Укажите имя разработчика")

        developer_id = developer_id_from_name(name)
        if self.document.find_developer(developer_id):
            raise ConflictError(f"Разработчик '{developer_id}' уже существует")

        developer = Developer(id=developer_id, name=name.strip(), availability=[])
        self.document.developers.append(developer)
        return developer

    def replace_templates(self, developers: List[Developer], timezone: Optional[str] = None) -> None:
        """
        Заменить секцию шаблонов целиком. Брони не трогаются.
        """
        ids = [developer.id for developer in developers]
        if len(ids) != len(set(ids)):
            raise ValidationError("id разработчиков должны быть уникальны")

        if timezone is not None:
            try:
                ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValidationError(f"Неизвестный часовой пояс: {timezone}")
            self.document.timezone = timezone

        self.document.developers = list(developers)
