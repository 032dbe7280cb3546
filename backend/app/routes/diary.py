"""
Diary routes.
"""

from fastapi import APIRouter, Depends

from app.dependencies import get_diary_service
from app.schemas import DiaryDayRead, DiaryEntryRead, DiaryEntryUpdate
from app.services.diary import DiaryService

router = APIRouter()


@router.get("", response_model=list[DiaryDayRead])
async def list_diary_days(service: DiaryService = Depends(get_diary_service)) -> list[dict]:
    """The past week (always) plus older days with notes, most recent first."""
    days = await service.days_to_display()
    return [
        {"day": item.day, "entry": item.entry.to_record() if item.entry else None}
        for item in days
    ]


@router.put("/{entry_date}", response_model=DiaryEntryRead)
async def put_diary_entry(
    entry_date: str,
    entry_in: DiaryEntryUpdate,
    service: DiaryService = Depends(get_diary_service),
) -> dict:
    """Write the note for one day (YYYY-MM-DD), replacing any previous text."""
    entry = await service.save_entry(entry_date, entry_in.content)
    return entry.to_record()
