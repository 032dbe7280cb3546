"""
Pytest configuration and fixtures for Daybook tests.
"""

from datetime import date

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app import dates
from app.config import Settings, get_settings
from app.main import app
from app.notifier import ListChangeNotifier, get_notifier
from app.services.context import TaskContext
from app.services.task_service import TaskService
from app.storage import JsonBlobStore, get_diary_store, get_task_store
from tests.fakes import InMemoryGateway

# Every test runs on this calendar day
TODAY = date(2025, 1, 1)


@pytest.fixture(autouse=True)
def frozen_today(monkeypatch):
    """Freeze the day used for status derivation and overdue checks."""
    monkeypatch.setattr(dates, "today", lambda: TODAY)
    return TODAY


@pytest.fixture
def task_store(tmp_path):
    return JsonBlobStore(tmp_path / "personal-tasks.json", "tasks")


@pytest.fixture
def diary_store(tmp_path):
    return JsonBlobStore(tmp_path / "diary-entries.json", "diary entries")


@pytest.fixture
def notifier():
    return ListChangeNotifier()


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def service(gateway, notifier):
    return TaskService(TaskContext(gateway=gateway, notifier=notifier))


@pytest.fixture
def test_settings(tmp_path):
    return Settings(data_dir=tmp_path, store_url=None, day_rollover_hour=6)


@pytest_asyncio.fixture(scope="function")
async def client(task_store, diary_store, notifier, test_settings):
    """Create an async test client backed by temporary JSON files."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_task_store] = lambda: task_store
    app.dependency_overrides[get_diary_store] = lambda: diary_store
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
