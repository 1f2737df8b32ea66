"""
Хранилище доступности: один JSON-документ на диске
Запись атомарная (временный файл + os.replace), изменения идут через один writer-lock
"""
import hashlib
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError as SchemaError

from .config import get_settings
from .models.document import AvailabilityDocument, default_document
from .services.errors import PersistenceError

logger = logging.getLogger(__name__)


class AvailabilityStore:
    """Файловое хранилище документа доступности"""

    def __init__(self, path, timezone: str = "America/Santiago"):
        self.path = Path(path)
        self.timezone = timezone
        self._lock = threading.RLock()

    def load(self) -> AvailabilityDocument:
        """
        Прочитать документ.
        Если файла нет - создать документ по умолчанию и сохранить его.
        """
        with self._lock:
            if not self.path.exists():
                document = default_document(self.timezone)
                self.save(document)
                logger.info(f"Создан файл хранилища по умолчанию: {self.path}")
                return document

            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Не удалось прочитать {self.path}: {e}")
                raise PersistenceError("Не удалось прочитать данные доступности") from e

            try:
                return AvailabilityDocument.model_validate(raw)
            except SchemaError as e:
                logger.error(f"Файл {self.path} имеет неверную структуру: {e}")
                raise PersistenceError("Файл данных доступности повреждён") from e

    def save(self, document: AvailabilityDocument) -> None:
        """
        Атомарная запись: сериализуем во временный файл в той же папке,
        затем переименовываем поверх основного файла.
        """
        folder = self.path.parent
        tmp_name = None
        try:
            folder.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp"
            ) as tf:
                tmp_name = tf.name
                json.dump(document.to_json_dict(), tf, ensure_ascii=False, indent=2)
                tf.flush()
                os.fsync(tf.fileno())

            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Ошибка записи {self.path}: {e}")
            if tmp_name:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise PersistenceError("Не удалось сохранить данные доступности") from e

    @contextmanager
    def transaction(self) -> Iterator[AvailabilityDocument]:
        """
        Чтение-изменение-запись под одним writer-lock.
        Документ сохраняется только если блок завершился без исключения.
        """
        with self._lock:
            document = self.load()
            yield document
            self.save(document)

    @staticmethod
    def etag(document: AvailabilityDocument) -> str:
        """Хеш содержимого документа для If-Match"""
        payload = json.dumps(document.to_json_dict(), sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@lru_cache()
def _default_store() -> AvailabilityStore:
    settings = get_settings()
    return AvailabilityStore(settings.DATA_FILE, timezone=settings.TIMEZONE)


def get_store() -> AvailabilityStore:
    """
    Dependency для получения хранилища
    Использование:
        @router.get("/items")
        def read_items(store: AvailabilityStore = Depends(get_store)):
            ...
    """
    return _default_store()


def init_store() -> AvailabilityDocument:
    """
    Инициализация хранилища
    Создаёт файл с шаблоном по умолчанию, если его ещё нет
    """
    return get_store().load()
