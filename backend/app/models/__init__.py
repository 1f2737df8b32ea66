"""
Pydantic модели документа хранилища
"""
from .slot import BookedSlot
from .developer import Developer, DayAvailability, TimeRange
from .document import AvailabilityDocument, default_document

__all__ = [
    "BookedSlot",
    "Developer",
    "DayAvailability",
    "TimeRange",
    "AvailabilityDocument",
    "default_document",
]
