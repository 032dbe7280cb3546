from pydantic import BaseModel, ConfigDict, Field

from app.models.task import Task, TaskStatus, TaskType


class TaskSave(BaseModel):
    """Schema for creating or editing a task. Omit `id` to create."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    title: str = ""
    desc: str = ""
    due: str | None = None
    type: str = TaskType.REGULAR.value  # Stored values and short names are both accepted
    status: str | None = None
    parent_id: int | None = Field(default=None, alias="parentId")
    end_date: str | None = Field(default=None, alias="endDate")
    frequency: int | None = None

    def to_task(self) -> Task:
        return Task.from_record(self.model_dump(by_alias=True))


class TaskRead(BaseModel):
    """Schema for reading a task; serialized with the stored camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    title: str
    desc: str
    due: str | None
    type: TaskType
    status: TaskStatus | None
    parent_id: int | None = Field(alias="parentId")
    end_date: str | None = Field(alias="endDate")
    frequency: int | None


class OperationResponse(BaseModel):
    """Outcome of a save or delete: the whole resulting list."""
    success: bool
    tasks: list[TaskRead]


class TaskStatsRead(BaseModel):
    total: int
    done: int
    due: int
    late: int


class CalendarMonthRead(BaseModel):
    year: int
    month: int
    name: str


class CalendarRead(BaseModel):
    months: list[CalendarMonthRead]
    days: dict[str, list[TaskRead]]


class IntegrityRead(BaseModel):
    ok: bool
    families: dict[int, list[int]]
    orphans: list[int]
    problems: list[str]


class RevisionRead(BaseModel):
    revision: int
