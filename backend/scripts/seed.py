#!/usr/bin/env python3
"""
Seed script to fill a data directory with demo tasks and diary entries.

Creates a realistic mix through the real save pipeline:
- Regular tasks spread around today (some late, some done)
- Reminders
- Planning tasks (no due date)
- Periodic families with different frequencies

Usage:
    python -m scripts.seed [--families 3] [--clear] [--data-dir data]

Options:
    --families N   Number of periodic families to create (default: 3)
    --clear        Clear existing data before seeding
    --data-dir     Directory holding the JSON files (default: DAYBOOK_DATA_DIR)
"""

import argparse
import asyncio
import random
import time
from pathlib import Path

from app import dates
from app.config import get_settings
from app.gateway import StoreTaskGateway
from app.models.task import Task, TaskType, new_task_id
from app.notifier import ListChangeNotifier
from app.services import views
from app.services.context import TaskContext
from app.services.diary import DiaryService
from app.services.families import check_integrity
from app.services.task_service import TaskService
from app.storage import JsonBlobStore

TITLES = [
    "Pay rent",
    "Call the dentist",
    "Water the plants",
    "Renew passport",
    "Review budget",
    "Clean the fridge",
    "Back up photos",
    "Read a chapter",
]


async def clear_data(task_store: JsonBlobStore, diary_store: JsonBlobStore):
    """Clear all existing data."""
    print("Clearing existing data...")
    await task_store.write([])
    await diary_store.write([])
    print("Data cleared.")


async def seed_tasks(service: TaskService, num_families: int) -> int:
    """
    Save a mix of tasks one by one, like a user would.

    Ids are assigned up front so quick consecutive saves never share a
    clock id.
    """
    today = dates.today()
    next_id = new_task_id()
    saved = 0

    def take_id() -> int:
        nonlocal next_id
        next_id += 1
        return next_id

    # Regular tasks from two weeks ago to two weeks ahead
    for offset in range(-14, 15, 4):
        status = "done" if offset < 0 and random.random() < 0.5 else None
        await service.save(Task(
            id=take_id(),
            title=random.choice(TITLES),
            due=dates.to_iso(dates.add_days(today, offset)),
            type=TaskType.REGULAR,
            status=status,
        ))
        saved += 1

    # Reminders
    for offset in (1, 10):
        await service.save(Task(
            id=take_id(),
            title=f"Reminder: {random.choice(TITLES).lower()}",
            due=dates.to_iso(dates.add_days(today, offset)),
            type=TaskType.REMINDER,
        ))
        saved += 1

    # Planning board
    for title in ("Plan summer trip", "Sort out the garage"):
        await service.save(Task(id=take_id(), title=title))
        saved += 1

    # Periodic families
    for index in range(num_families):
        frequency = random.choice([1, 3, 7, 14])
        start = dates.add_days(today, -random.randint(0, 10))
        await service.save(Task(
            id=take_id(),
            title=f"Routine #{index + 1}",
            due=dates.to_iso(start),
            type=TaskType.PERIODIC,
            frequency=frequency,
            end_date=dates.to_iso(dates.add_days(start, frequency * random.randint(3, 12))),
        ))
        saved += 1

    return saved


async def seed_diary(service: DiaryService):
    today = dates.today()
    for offset in (0, 2, 9, 30):
        day = dates.to_iso(dates.add_days(today, -offset))
        await service.save_entry(day, f"Notes for {day}")


async def show_stats(service: TaskService):
    """Print counters and the family integrity report."""
    tasks = await service.list_tasks()
    counts = views.task_stats(tasks)
    report = check_integrity(tasks)

    print(f"\n=== Task Statistics ===")
    print(f"Tasks:     {len(tasks)}")
    print(f"Due:       {counts['due']}")
    print(f"Late:      {counts['late']}")
    print(f"Done:      {counts['done']}")
    print(f"Families:  {len(report.families)}")
    print(f"Planning:  {len(views.planning_tasks(tasks))}")
    print(f"Integrity: {'ok' if report.ok else report.problems + report.orphans}")


async def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Seed the data directory with demo tasks")
    parser.add_argument("--families", type=int, default=3, help="Number of periodic families to create")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")
    parser.add_argument("--data-dir", type=Path, default=settings.data_dir, help="Data directory")

    args = parser.parse_args()

    print(f"=== Daybook Seed Script ===")

    task_store = JsonBlobStore(args.data_dir / settings.tasks_file, "tasks")
    diary_store = JsonBlobStore(args.data_dir / settings.diary_file, "diary entries")
    task_store.ensure_exists()
    diary_store.ensure_exists()

    if args.clear:
        await clear_data(task_store, diary_store)

    service = TaskService(TaskContext(gateway=StoreTaskGateway(task_store), notifier=ListChangeNotifier()))

    start_time = time.time()
    saved = await seed_tasks(service, args.families)
    await seed_diary(DiaryService(diary_store, rollover_hour=settings.day_rollover_hour))
    print(f"Saved {saved} tasks in {time.time() - start_time:.2f}s")

    await show_stats(service)

    print(f"\n=== Seeding Complete ===")
    print(f"Data directory: {args.data_dir.resolve()}")


if __name__ == "__main__":
    asyncio.run(main())
