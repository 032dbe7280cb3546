"""
Periodic task lifecycle.

Saving a member of a periodic family is resolved by the first matching case:

1. Type conversion    - the stored type differs, or a new task is created
                        as periodic. Delegated to TaskConverter.
2. Mother end date    - the mother's end date changed: propagate the group
                        properties, then trim or extend the family.
3. Child end date     - same reconciliation when the edit came through a
                        child, keyed off the mother's stored end date.
4. Parameter change   - title, due, end date or frequency differ from the
                        mother: rebuild the whole family.
5. Anything else      - hand back to the caller for a plain upsert.

Cases 1-4 persist through the context and stop the pipeline.
"""

from dataclasses import dataclass, field
from datetime import date

from app import dates
from app.logging_config import get_logger
from app.models.task import Task, TaskStatus, TaskType
from app.services import recurrence
from app.services.context import TaskContext
from app.services.converter import TaskConverter

logger = get_logger(__name__)


@dataclass
class HandlerResult:
    success: bool
    tasks: list[Task] = field(default_factory=list)
    should_continue: bool = False


class PeriodicTaskHandler:
    def __init__(self, converter: TaskConverter | None = None):
        self.converter = converter or TaskConverter()

    # ---- save ----

    async def handle_save(
        self,
        task: Task,
        tasks: list[Task],
        snapshot: Task | None,
        is_existing: bool,
        ctx: TaskContext,
    ) -> HandlerResult:
        """
        Resolve a save of `task` against the loaded list.

        Args:
            task: The submitted task
            tasks: Every task as loaded before this save
            snapshot: Stored version of `task` (None for a new task)
            is_existing: Whether a stored version exists
            ctx: Gateway + notifier used to commit terminal cases
        """
        if self.needs_conversion(task, snapshot, is_existing):
            result = self.converter.convert(task, tasks)
            return await self._commit(ctx, result.tasks)

        # Family membership comes from the store, never from the client
        if snapshot is not None and task.parent_id != snapshot.parent_id:
            task = task.derive(parent_id=snapshot.parent_id)

        family_id = task.family_id
        mother_snapshot = recurrence.find_by_id(family_id, tasks)
        reference = mother_snapshot or snapshot

        updated = recurrence.upsert(task, tasks)
        updated = recurrence.propagate_group_properties(task, family_id, updated)

        if task.is_mother and task.end_date != snapshot.end_date:
            logger.info(f"Mother {family_id}: end date {snapshot.end_date} -> {task.end_date}")
            updated = self.reconcile_end_date(task, family_id, updated, snapshot.end_day)
            return await self._commit(ctx, updated)

        if not task.is_mother and task.end_date != reference.end_date:
            logger.info(f"Child {task.id} of {family_id}: end date {reference.end_date} -> {task.end_date}")
            updated = self.reconcile_end_date(task, family_id, updated, reference.end_day)
            return await self._commit(ctx, updated)

        if self.parameters_changed(task, reference):
            anchor = self._rebuild_anchor(task, mother_snapshot, tasks)
            logger.info(f"Family {family_id}: recurrence changed, rebuilding from {anchor}")
            updated = self.rebuild(task, family_id, updated, anchor)
            return await self._commit(ctx, updated)

        return HandlerResult(success=True, tasks=updated, should_continue=True)

    def needs_conversion(self, task: Task, snapshot: Task | None, is_existing: bool) -> bool:
        if is_existing and snapshot is not None:
            return snapshot.type is not task.type
        return task.type is TaskType.PERIODIC

    def parameters_changed(self, task: Task, reference: Task) -> bool:
        """
        Compare recurrence parameters against the mother's stored values.

        A child's own due date is per-occurrence and only compared when the
        mother itself is edited.
        """
        names = ["title", "end_date", "frequency"]
        if task.is_mother:
            names.append("due")
        return any(getattr(task, name) != getattr(reference, name) for name in names)

    # ---- family reshaping ----

    def reconcile_end_date(self, task: Task, family_id: int, tasks: list[Task], old_end: date | None) -> list[Task]:
        """Trim or extend the family so it ends at `task.end_date`."""
        new_end = task.end_day
        if old_end is None or new_end > old_end:
            return self.extend(task, family_id, tasks)
        if new_end < old_end:
            return self.trim(family_id, tasks, new_end)
        return tasks

    def trim(self, family_id: int, tasks: list[Task], new_end: date) -> list[Task]:
        """Drop children due after `new_end`. The mother always stays."""
        def surplus(item: Task) -> bool:
            return (
                recurrence.in_family(item, family_id)
                and item.id != family_id
                and item.due_date is not None
                and item.due_date > new_end
            )

        kept = [item for item in tasks if not surplus(item)]
        logger.debug(f"Family {family_id}: trimmed {len(tasks) - len(kept)} occurrences after {new_end}")
        return kept

    def extend(self, task: Task, family_id: int, tasks: list[Task]) -> list[Task]:
        """
        Append occurrences after the family's latest due date up to the new end.

        Child indexes continue after the highest one used, so ids freed by
        earlier deletions are never handed out again.
        """
        family = recurrence.family_members(family_id, tasks)
        mother = recurrence.find_by_id(family_id, tasks) or task.derive(id=family_id, parent_id=family_id)
        start = recurrence.latest_due(family) or mother.due_date
        first_index = recurrence.highest_child_index(family_id, tasks) + 1

        days = recurrence.occurrences_after(start, task.frequency, task.end_day)
        added = [
            recurrence.make_child(mother, first_index + offset, day)
            for offset, day in enumerate(days)
        ]
        logger.debug(f"Family {family_id}: added {len(added)} occurrences after {start}")
        return tasks + added

    def rebuild(self, task: Task, family_id: int, tasks: list[Task], anchor: date) -> list[Task]:
        """
        Regenerate the family from `anchor` in `task.frequency` steps.

        Status and description carry over from any old member due on the same
        day; the first item keeps the mother's id and current status/desc.
        """
        family = recurrence.family_members(family_id, tasks)
        current_mother = recurrence.find_by_id(family_id, tasks) or task

        by_day: dict[str, Task] = {}
        for member in family:
            if member.due and member.id != family_id:
                by_day.setdefault(member.due, member)

        mother = task.derive(
            id=family_id,
            parent_id=family_id,
            due=dates.to_iso(anchor),
            status=current_mother.status,
            desc=current_mother.desc,
        )

        children = []
        days = recurrence.occurrences_after(anchor, task.frequency, task.end_day)
        for index, day in enumerate(days, start=1):
            previous = by_day.get(dates.to_iso(day))
            children.append(recurrence.make_child(
                mother,
                index,
                day,
                status=previous.status if previous else TaskStatus.DUE,
                desc=previous.desc if previous else "",
            ))

        return recurrence.without_family(family_id, tasks) + [mother] + children

    def _rebuild_anchor(self, task: Task, mother_snapshot: Task | None, tasks: list[Task]) -> date:
        if task.is_mother:
            return task.due_date
        if mother_snapshot is not None and mother_snapshot.due_date is not None:
            return mother_snapshot.due_date
        # Orphaned family: start from its earliest occurrence
        family = recurrence.family_members(task.family_id, tasks)
        days = [member.due_date for member in family if member.due_date is not None]
        return min(days, default=task.due_date)

    # ---- delete ----

    async def handle_delete(self, task: Task, tasks: list[Task], ctx: TaskContext) -> HandlerResult:
        """Remove the whole family `task` belongs to."""
        family_id = task.family_id
        remaining = recurrence.without_family(family_id, tasks)
        logger.info(f"Deleting family {family_id} ({len(tasks) - len(remaining)} tasks)")
        return await self._commit(ctx, remaining)

    async def _commit(self, ctx: TaskContext, tasks: list[Task]) -> HandlerResult:
        success = await ctx.commit(tasks)
        return HandlerResult(success=success, tasks=tasks, should_continue=False)
