"""
Diary entries: one note per day, kept in their own JSON array store.
"""

from dataclasses import dataclass
from datetime import date

from pydantic import ValidationError as PydanticValidationError

from app import dates
from app.exceptions import ValidationError
from app.logging_config import get_logger
from app.models.diary import DiaryEntry, entry_id_for
from app.storage import JsonBlobStore

logger = get_logger(__name__)

RECENT_DAYS = 7


@dataclass
class DiaryDay:
    day: date
    entry: DiaryEntry | None = None


def update_entry(entries: list[DiaryEntry], entry_date: str, content: str) -> list[DiaryEntry]:
    """Replace the content for `entry_date`, or append a new entry for it."""
    updated = []
    found = False
    for entry in entries:
        if entry.entry_date == entry_date:
            entry = entry.model_copy(update={"content": content})
            found = True
        updated.append(entry)
    if not found:
        updated.append(DiaryEntry(
            entry_id=entry_id_for(entry_date),
            entry_date=entry_date,
            content=content,
        ))
    return updated


def display_days(entries: list[DiaryEntry], today: date) -> list[DiaryDay]:
    """
    Days shown on the diary page, most recent first.

    The last RECENT_DAYS days ending `today` always appear; older days only
    when they have a non-empty entry.
    """
    by_day = {entry.entry_date: entry for entry in entries}
    first_recent = dates.add_days(today, -(RECENT_DAYS - 1))

    recent = [
        DiaryDay(day=day, entry=by_day.get(dates.to_iso(day)))
        for day in dates.step_days(first_recent, 1, today)
    ]

    older = []
    for entry in entries:
        day = dates.parse_date(entry.entry_date)
        if day is not None and day < first_recent and entry.content.strip():
            older.append(DiaryDay(day=day, entry=entry))

    days = older + recent
    days.sort(key=lambda item: item.day, reverse=True)
    return days


class DiaryService:
    def __init__(self, store: JsonBlobStore, rollover_hour: int = 6):
        self.store = store
        self.rollover_hour = rollover_hour

    async def list_entries(self) -> list[DiaryEntry]:
        records = await self.store.read()
        entries = []
        for record in records:
            try:
                entries.append(DiaryEntry.model_validate(record))
            except PydanticValidationError:
                logger.warning(f"Skipping malformed diary record: {record!r}")
        return entries

    async def save_entry(self, entry_date: str, content: str) -> DiaryEntry:
        day = dates.parse_date(entry_date)
        if day is None:
            raise ValidationError(
                f"Invalid diary date: {entry_date}",
                details=[{"loc": ["path", "entry_date"], "msg": "expected YYYY-MM-DD", "type": "value_error"}],
            )
        entry_date = dates.to_iso(day)

        entries = update_entry(await self.list_entries(), entry_date, content)
        await self.store.write([entry.to_record() for entry in entries])
        logger.info(f"Saved diary entry for {entry_date}")
        return next(entry for entry in entries if entry.entry_date == entry_date)

    async def days_to_display(self, today: date | None = None) -> list[DiaryDay]:
        today = today or dates.adjusted_today(self.rollover_hour)
        return display_days(await self.list_entries(), today)
