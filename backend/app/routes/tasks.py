"""
Task routes for the Daybook API.
"""

from datetime import date

from fastapi import APIRouter, Depends

from app import dates
from app.dependencies import get_task_service
from app.exceptions import ErrorResponse, PersistenceError
from app.logging_config import get_logger
from app.models.task import Task
from app.notifier import ListChangeNotifier, get_notifier
from app.schemas import (
    CalendarRead,
    IntegrityRead,
    OperationResponse,
    RevisionRead,
    TaskRead,
    TaskSave,
    TaskStatsRead,
)
from app.services import views
from app.services.families import check_integrity
from app.services.task_service import OperationResult, TaskService

logger = get_logger(__name__)

router = APIRouter(
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


def _records(tasks: list[Task]) -> list[dict]:
    return [task.to_record() for task in tasks]


def _operation_response(result: OperationResult, action: str) -> dict:
    if not result.success:
        raise PersistenceError(f"Task list could not be saved after {action}")
    return {"success": result.success, "tasks": _records(result.tasks)}


@router.get("", response_model=list[TaskRead])
async def list_tasks(service: TaskService = Depends(get_task_service)) -> list[dict]:
    """List every task with its status recomputed for today."""
    tasks = await service.list_tasks()
    logger.debug(f"Listed {len(tasks)} tasks")
    return _records(tasks)


@router.post("", response_model=OperationResponse)
async def save_task(
    task_in: TaskSave,
    service: TaskService = Depends(get_task_service),
) -> dict:
    """
    Create or edit a task.

    Periodic tasks expand into (or reshape) their whole family; type changes
    convert between regular tasks, periodic families and reminders. The
    response carries the complete resulting list.
    """
    result = await service.save(task_in.to_task())
    return _operation_response(result, "save")


@router.get("/overdue", response_model=list[TaskRead])
async def list_overdue(service: TaskService = Depends(get_task_service)) -> list[dict]:
    """Late tasks, oldest due date first."""
    return _records(views.overdue_tasks(await service.list_tasks()))


@router.get("/planning", response_model=list[TaskRead])
async def list_planning(service: TaskService = Depends(get_task_service)) -> list[dict]:
    """Tasks without a due date, oldest first."""
    return _records(views.planning_tasks(await service.list_tasks()))


@router.get("/calendar", response_model=CalendarRead)
async def get_calendar(
    start: date | None = None,
    end: date | None = None,
    service: TaskService = Depends(get_task_service),
) -> dict:
    """Tasks grouped by due day plus the months the calendar should show."""
    tasks = await service.list_tasks()
    months = views.calendar_months(tasks, dates.today())
    days = views.calendar_days(tasks, start, end)
    return {
        "months": [{"year": m.year, "month": m.month, "name": m.name} for m in months],
        "days": {day: _records(items) for day, items in days.items()},
    }


@router.get("/stats", response_model=TaskStatsRead)
async def get_stats(service: TaskService = Depends(get_task_service)) -> dict:
    return views.task_stats(await service.list_tasks())


@router.get("/integrity", response_model=IntegrityRead)
async def get_integrity(service: TaskService = Depends(get_task_service)) -> dict:
    """Report periodic families, orphaned children and invariant violations."""
    report = check_integrity(await service.list_tasks())
    if not report.ok:
        logger.warning(f"Integrity check: {len(report.orphans)} orphans, {len(report.problems)} problems")
    return {
        "ok": report.ok,
        "families": report.families,
        "orphans": report.orphans,
        "problems": report.problems,
    }


@router.get("/revision", response_model=RevisionRead)
async def get_revision(notifier: ListChangeNotifier = Depends(get_notifier)) -> dict:
    """Counter bumped on every saved change; poll it to know when to re-fetch."""
    return {"revision": notifier.revision}


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
) -> dict:
    """Get a task by ID."""
    task = await service.get_task(task_id)
    return task.to_record()


@router.delete("/{task_id}", response_model=OperationResponse)
async def delete_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
) -> dict:
    """
    Delete a task.

    Deleting any member of a periodic family removes the whole family.
    """
    result = await service.delete(task_id)
    return _operation_response(result, "delete")
