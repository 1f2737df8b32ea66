"""
Конфигурация приложения
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path
from typing import Dict, List


class Settings(BaseSettings):
    """Настройки приложения"""

    # Storage
    DATA_FILE: str = "data/availability.json"

    # Часовой пояс календаря (единственный)
    TIMEZONE: str = "America/Santiago"

    # Booking Settings
    # Время начала слота -> длительность в минутах
    BOOKING_SLOTS: Dict[str, int] = {
        "10:30": 30,
        "14:00": 60,
        "15:00": 60,
        "16:00": 60,
        "17:00": 60,
    }
    CLIENT_NAME_MIN_LENGTH: int = 2
    CLIENT_NAME_MAX_LENGTH: int = 100

    # Сетка редактора недельного шаблона
    TEMPLATE_SLOT_MINUTES: int = 30
    TEMPLATE_DAY_START: str = "09:00"
    TEMPLATE_DAY_END: str = "19:00"

    # Rate limiting (на клиента, только /api/*)
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Development
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        # Путь к .env относительно корня проекта
        env_file = Path(__file__).resolve().parent.parent.parent / ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Получить настройки приложения (с кешированием)"""
    return Settings()
