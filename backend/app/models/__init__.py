from app.models.task import Task, TaskStatus, TaskType
from app.models.diary import DiaryEntry

__all__ = [
    "Task",
    "TaskStatus",
    "TaskType",
    "DiaryEntry",
]
