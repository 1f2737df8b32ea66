from __future__ import annotations

from datetime import date, timedelta

import pytest

from app.models.document import AvailabilityDocument, default_document
from app.services.booking import BookingService
from app.services.errors import ConflictError, NotFoundError, ValidationError
from app.services.schedule import (
    ScheduleService,
    collapse_times_to_ranges,
    is_time_open,
    minutes_to_time,
    time_to_minutes,
)
from app.models.developer import Developer, TimeRange

# 2025-03-10 - понедельник
MONDAY = date(2025, 3, 10)


def _document() -> AvailabilityDocument:
    return default_document("America/Santiago")


def _slot(day: dict, time_str: str) -> dict:
    return next(s for s in day["slots"] if s["time"] == time_str)


def test_time_minutes_conversion() -> None:
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("10:30") == 630
    assert minutes_to_time(630) == "10:30"
    assert minutes_to_time(5) == "00:05"


def test_interval_containment_is_half_open() -> None:
    ranges = [TimeRange(start="14:00", end="15:00")]
    assert is_time_open(ranges, "14:00")
    assert is_time_open(ranges, "14:30")
    assert not is_time_open(ranges, "15:00")
    assert not is_time_open(ranges, "13:30")
    assert not is_time_open([], "14:00")


def test_collapse_contiguous_times_into_single_range() -> None:
    assert collapse_times_to_ranges(["10:30", "11:00", "11:30"]) == [
        {"start": "10:30", "end": "12:00"}
    ]


def test_collapse_is_order_independent_and_ignores_duplicates() -> None:
    assert collapse_times_to_ranges(["11:30", "10:30", "11:00", "11:00"]) == [
        {"start": "10:30", "end": "12:00"}
    ]


def test_collapse_splits_on_gap() -> None:
    assert collapse_times_to_ranges(["09:00", "09:30", "11:00", "14:00", "14:30"]) == [
        {"start": "09:00", "end": "10:00"},
        {"start": "11:00", "end": "11:30"},
        {"start": "14:00", "end": "15:00"},
    ]


def test_collapse_empty_selection() -> None:
    assert collapse_times_to_ranges([]) == []


def test_collapse_is_inverse_of_containment_check() -> None:
    selected = ["09:00", "09:30", "10:00", "12:30", "17:00", "17:30"]
    ranges = [TimeRange(**r) for r in collapse_times_to_ranges(selected)]
    service = ScheduleService(_document())

    for t in service.template_times():
        assert is_time_open(ranges, t) == (t in selected)


def test_template_grid_times() -> None:
    times = ScheduleService(_document()).template_times()
    assert times[0] == "09:00"
    assert times[-1] == "19:00"
    assert len(times) == 21


def test_week_starts_on_monday_and_has_seven_days() -> None:
    week = ScheduleService(_document()).get_week(date(2025, 3, 13), today=date(2025, 3, 1))

    assert [d["date"] for d in week] == [(MONDAY + timedelta(days=i)).isoformat() for i in range(7)]
    assert [d["dayOfWeek"] for d in week] == [1, 2, 3, 4, 5, 6, 7]
    assert [s["time"] for s in week[0]["slots"]] == ["10:30", "14:00", "15:00", "16:00", "17:00"]
    assert _slot(week[0], "10:30")["durationMinutes"] == 30
    assert _slot(week[0], "14:00")["durationMinutes"] == 60


def test_week_follows_default_template() -> None:
    week = ScheduleService(_document()).get_week(MONDAY, today=date(2025, 3, 1))

    for day in week[:5]:
        assert all(s["available"] for s in day["slots"])
    for day in week[5:]:
        assert not any(s["available"] for s in day["slots"])
        assert not any(s["inTemplate"] for s in day["slots"])


def test_booked_slot_is_not_available() -> None:
    document = _document()
    BookingService(document).book("2025-03-10", "14:00", "Ana Pérez")

    week = ScheduleService(document).get_week(MONDAY, today=date(2025, 3, 9))
    monday = week[0]

    assert _slot(monday, "14:00")["booked"] is True
    assert _slot(monday, "14:00")["available"] is False
    assert _slot(monday, "15:00")["available"] is True


def test_past_dates_are_never_available() -> None:
    document = _document()
    service = ScheduleService(document)
    today = date(2025, 3, 12)

    week = service.get_week(MONDAY, today=today)

    for day in week:
        past = date.fromisoformat(day["date"]) < today
        for slot in day["slots"]:
            assert slot["past"] == past
            if past:
                assert slot["available"] is False

    # Сегодняшний день ещё доступен
    assert _slot(week[2], "10:30")["available"] is True


def test_past_dates_unavailable_even_without_template() -> None:
    document = AvailabilityDocument()
    week = ScheduleService(document).get_week(MONDAY, today=date(2025, 4, 1))
    assert not any(s["available"] for day in week for s in day["slots"])


def test_slots_only_document_ignores_template() -> None:
    document = AvailabilityDocument()
    week = ScheduleService(document).get_week(MONDAY, today=date(2025, 3, 1))

    saturday = week[5]
    assert all(s["available"] for s in saturday["slots"])
    assert all(s["inTemplate"] for s in saturday["slots"])


def test_week_for_unknown_developer_is_not_found() -> None:
    with pytest.raises(NotFoundError):
        ScheduleService(_document()).get_week(MONDAY, developer_id="nobody", today=MONDAY)


def test_week_for_selected_developer() -> None:
    document = _document()
    service = ScheduleService(document)
    service.add_developer("Maria")
    service.set_day_template("maria", 6, ["10:30"])

    week = service.get_week(MONDAY, developer_id="maria", today=date(2025, 3, 1))

    assert _slot(week[5], "10:30")["available"] is True
    assert _slot(week[5], "14:00")["available"] is False
    assert not any(s["available"] for s in week[0]["slots"])


def test_template_grid_reflects_template() -> None:
    grid = ScheduleService(_document()).get_template_grid("daniel")

    assert [d["dayOfWeek"] for d in grid] == [1, 2, 3, 4, 5, 6, 7]
    monday = {s["time"]: s["open"] for s in grid[0]["slots"]}
    assert monday["10:30"] and monday["12:00"] and monday["18:00"]
    assert not monday["09:00"] and not monday["12:30"] and not monday["18:30"]
    assert not any(s["open"] for s in grid[6]["slots"])


def test_set_day_template_collapses_selection() -> None:
    document = _document()
    service = ScheduleService(document)

    day = service.set_day_template("daniel", 1, ["10:30", "11:00", "11:30"])

    assert day == {"dayOfWeek": 1, "slots": [{"start": "10:30", "end": "12:00"}]}
    assert document.developers[0].day(1) == [TimeRange(start="10:30", end="12:00")]


def test_set_day_template_adds_missing_day_in_order() -> None:
    document = _document()
    service = ScheduleService(document)

    service.set_day_template("daniel", 7, ["09:00"])
    service.set_day_template("daniel", 6, [])

    days = [entry.day_of_week for entry in document.developers[0].availability]
    assert days == [1, 2, 3, 4, 5, 6, 7]
    assert document.developers[0].day(6) == []


def test_set_day_template_rejects_bad_input() -> None:
    service = ScheduleService(_document())

    with pytest.raises(ValidationError):
        service.set_day_template("daniel", 0, ["10:30"])
    with pytest.raises(ValidationError):
        service.set_day_template("daniel", 8, ["10:30"])
    with pytest.raises(ValidationError):
        service.set_day_template("daniel", 1, ["10:15"])
    with pytest.raises(NotFoundError):
        service.set_day_template("nobody", 1, ["10:30"])


def test_add_developer() -> None:
    document = _document()
    developer = ScheduleService(document).add_developer("  Maria José Soto ")

    assert developer.id == "maria-josé-soto"
    assert developer.name == "Maria José Soto"
    assert developer.availability == []
    assert document.find_developer("maria-josé-soto") is developer


def test_add_developer_rejects_duplicate_and_blank() -> None:
    service = ScheduleService(_document())

    with pytest.raises(ConflictError):
        service.add_developer("Daniel")
    with pytest.raises(ValidationError):
        service.add_developer("   ")
    with pytest.raises(ValidationError):
        service.add_developer(None)


def test_replace_templates_keeps_bookings() -> None:
    document = _document()
    BookingService(document).book("2025-03-10", "14:00", "Ana Pérez")

    ScheduleService(document).replace_templates(
        [Developer(id="eva", name="Eva")], timezone="Europe/Madrid"
    )

    assert [d.id for d in document.developers] == ["eva"]
    assert document.timezone == "Europe/Madrid"
    assert len(document.slots) == 1


def test_replace_templates_rejects_duplicate_ids_and_bad_timezone() -> None:
    service = ScheduleService(_document())

    with pytest.raises(ValidationError):
        service.replace_templates([Developer(id="a", name="A"), Developer(id="a", name="B")])
    with pytest.raises(ValidationError):
        service.replace_templates([], timezone="Mars/Olympus")
