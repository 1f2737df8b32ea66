"""
Скрипт инициализации хранилища
Создаёт файл данных с шаблоном по умолчанию, если его ещё нет
Запустить из папки backend: python init_store.py [--reset]
"""
import argparse
import logging
import sys
sys.path.insert(0, '.')

from app.config import get_settings
from app.database import get_store
from app.models.document import default_document
from app.services.errors import PersistenceError


def main() -> int:
    parser = argparse.ArgumentParser(description="Инициализация файла доступности")
    parser.add_argument("--reset", action="store_true", help="Перезаписать файл документом по умолчанию")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    settings = get_settings()
    store = get_store()

    try:
        if args.reset:
            store.save(default_document(settings.TIMEZONE))
            print(f"Файл пересоздан: {store.path}")
        document = store.load()
    except PersistenceError as e:
        print(f"Ошибка: {e.message}")
        return 1

    print(f"Файл: {store.path}")
    print(f"Разработчиков: {len(document.developers)}")
    print(f"Броней: {len(document.slots)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
