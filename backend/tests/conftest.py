from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.database import AvailabilityStore, get_store
from app.main import app


@pytest.fixture
def store(tmp_path) -> AvailabilityStore:
    # Отдельный файл на каждый тест, реальный data/ не трогаем.
    return AvailabilityStore(tmp_path / "availability.json", timezone="America/Santiago")


@pytest.fixture
def client(store: AvailabilityStore):
    app.dependency_overrides[get_store] = lambda: store
    app.state.rate_limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
