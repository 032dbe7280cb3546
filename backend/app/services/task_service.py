"""
Save and delete pipelines.

Both reload the full list through the gateway, work on it in memory and
write the whole list back (last writer wins). Validation always happens
before anything is changed.
"""

from dataclasses import dataclass, field

from app.exceptions import NotFoundError, PeriodicParametersError
from app.logging_config import get_logger
from app.models.task import Task
from app.services import recurrence
from app.services.context import TaskContext
from app.services.converter import TaskConverter, missing_periodic_parameters
from app.services.periodic import PeriodicTaskHandler

logger = get_logger(__name__)


@dataclass
class OperationResult:
    success: bool
    tasks: list[Task] = field(default_factory=list)


class TaskService:
    def __init__(
        self,
        ctx: TaskContext,
        converter: TaskConverter | None = None,
        handler: PeriodicTaskHandler | None = None,
    ):
        self.ctx = ctx
        self.converter = converter or TaskConverter()
        self.handler = handler or PeriodicTaskHandler(self.converter)

    async def list_tasks(self) -> list[Task]:
        return await self.ctx.load()

    async def get_task(self, task_id: int) -> Task:
        task = recurrence.find_by_id(task_id, await self.ctx.load())
        if task is None:
            raise NotFoundError("Task", str(task_id))
        return task

    async def save(self, task: Task) -> OperationResult:
        """
        Persist a created or edited task.

        Periodic tasks (or tasks that used to be periodic) go through the
        family handler, other type changes through the converter, the rest
        is a plain upsert.
        """
        task.validate()

        tasks = await self.ctx.load()
        stored = recurrence.find_by_id(task.id, tasks)

        if task.is_periodic:
            missing = missing_periodic_parameters(task)
            if missing:
                raise PeriodicParametersError(missing)

        if task.is_periodic or (stored is not None and stored.is_periodic):
            result = await self.handler.handle_save(task, tasks, stored, stored is not None, self.ctx)
            if not result.should_continue:
                return OperationResult(success=result.success, tasks=result.tasks)
            # The handler already placed the edit, with its family link
            # restored from the store
            updated = result.tasks

        elif stored is not None and stored.type is not task.type:
            conversion = self.converter.convert(task, tasks)
            success = await self.ctx.commit(conversion.tasks)
            return OperationResult(success=success, tasks=conversion.tasks)

        else:
            updated = recurrence.upsert(task, tasks)
        success = await self.ctx.commit(updated)
        logger.info(f"{'Updated' if stored else 'Created'} task: id={task.id} title='{task.title}'")
        return OperationResult(success=success, tasks=updated)

    async def delete(self, task_id: int) -> OperationResult:
        """Delete a task; periodic tasks take their whole family with them."""
        tasks = await self.ctx.load()
        task = recurrence.find_by_id(task_id, tasks)
        if task is None:
            raise NotFoundError("Task", str(task_id))

        if task.is_periodic:
            result = await self.handler.handle_delete(task, tasks, self.ctx)
            return OperationResult(success=result.success, tasks=result.tasks)

        remaining = recurrence.remove_by_id(task_id, tasks)
        success = await self.ctx.commit(remaining)
        logger.info(f"Deleted task: id={task_id}")
        return OperationResult(success=success, tasks=remaining)
