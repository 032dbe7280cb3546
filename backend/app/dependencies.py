"""
FastAPI dependency providers.

Tests swap these out through `app.dependency_overrides`.
"""

from fastapi import Depends

from app.config import Settings, get_settings
from app.gateway import HttpTaskGateway, StoreTaskGateway, TaskGateway
from app.notifier import ListChangeNotifier, get_notifier
from app.services.context import TaskContext
from app.services.diary import DiaryService
from app.services.task_service import TaskService
from app.storage import JsonBlobStore, get_diary_store, get_task_store


def get_task_gateway(
    settings: Settings = Depends(get_settings),
    store: JsonBlobStore = Depends(get_task_store),
) -> TaskGateway:
    """Remote blob store when DAYBOOK_STORE_URL is set, the local file otherwise."""
    if settings.store_url:
        return HttpTaskGateway(settings.store_url, timeout=settings.store_timeout)
    return StoreTaskGateway(store)


def get_task_service(
    gateway: TaskGateway = Depends(get_task_gateway),
    notifier: ListChangeNotifier = Depends(get_notifier),
) -> TaskService:
    return TaskService(TaskContext(gateway=gateway, notifier=notifier))


def get_diary_service(
    settings: Settings = Depends(get_settings),
    store: JsonBlobStore = Depends(get_diary_store),
) -> DiaryService:
    return DiaryService(store, rollover_hour=settings.day_rollover_hour)
