"""
Diary entry - one free-text note per calendar day.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def entry_id_for(entry_date: str) -> int:
    """Ids are the date digits: 2025-03-09 -> 20250309."""
    return int(entry_date.replace("-", ""))


class DiaryEntry(BaseModel):
    """Stored as {"diaryEntryId", "diaryEntryDate", "diaryEntry"}."""

    model_config = ConfigDict(populate_by_name=True)

    entry_id: int = Field(alias="diaryEntryId")
    entry_date: str = Field(alias="diaryEntryDate")
    content: str = Field(default="", alias="diaryEntry")

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
