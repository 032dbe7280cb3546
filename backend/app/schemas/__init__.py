from app.schemas.task import (
    TaskSave,
    TaskRead,
    OperationResponse,
    TaskStatsRead,
    CalendarMonthRead,
    CalendarRead,
    IntegrityRead,
    RevisionRead,
)
from app.schemas.diary import DiaryEntryRead, DiaryEntryUpdate, DiaryDayRead

__all__ = [
    "TaskSave",
    "TaskRead",
    "OperationResponse",
    "TaskStatsRead",
    "CalendarMonthRead",
    "CalendarRead",
    "IntegrityRead",
    "RevisionRead",
    "DiaryEntryRead",
    "DiaryEntryUpdate",
    "DiaryDayRead",
]
