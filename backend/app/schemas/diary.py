from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class DiaryEntryRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    entry_id: int = Field(alias="diaryEntryId")
    entry_date: str = Field(alias="diaryEntryDate")
    content: str = Field(alias="diaryEntry")


class DiaryEntryUpdate(BaseModel):
    """Schema for writing the note of one day."""
    content: str = ""


class DiaryDayRead(BaseModel):
    """A day on the diary page; `entry` is null when nothing was written."""
    model_config = ConfigDict(from_attributes=True)

    day: date
    entry: DiaryEntryRead | None = None
