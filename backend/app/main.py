"""
Главный файл FastAPI приложения
Dev Availability Calendar - API бронирования
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import get_settings
from .database import init_store
from .routes.availability import router as availability_router
from .routes.bookings import router as bookings_router
from .services.errors import BookingError
from .services.rate_limit import RateLimiter

settings = get_settings()
logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Лимит запросов к /api/* на клиента (по IP)"""

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        limiter: RateLimiter = request.app.state.rate_limiter
        client_key = request.client.host if request.client else "unknown"

        if not limiter.hit(client_key):
            logger.warning(f"Превышен лимит запросов: {client_key}")
            return JSONResponse(
                status_code=429,
                content={"error": "Слишком много запросов, попробуйте позже"},
                headers={"Retry-After": str(limiter.retry_after(client_key))},
            )

        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Файл хранилища создаётся один раз при старте, не на каждый запрос
    document = init_store()
    logger.info(
        f"Хранилище готово: {settings.DATA_FILE} "
        f"(разработчиков: {len(document.developers)}, броней: {len(document.slots)})"
    )
    yield


# FastAPI приложение
app = FastAPI(
    title="Dev Availability Calendar API",
    description="API для бронирования слотов в календаре разработчика",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.state.rate_limiter = RateLimiter(
    settings.RATE_LIMIT_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag"],
)

# Rate limit
app.add_middleware(RateLimitMiddleware)

# Подключение роутеров
app.include_router(bookings_router)
app.include_router(availability_router)


# ==================== ОБРАБОТКА ОШИБОК ====================

@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Неверный формат данных: {location} - {first.get('msg')}" if location else "Неверный формат данных"
    else:
        message = "Неверный формат данных"
    logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }


def run() -> None:
    """Запуск сервера (точка входа dev-calendar)"""
    import uvicorn

    setup_logging()
    logger.info(f"Dev Availability Calendar Server: http://localhost:{settings.PORT}")
    logger.info(f"Timezone: {settings.TIMEZONE}")
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
