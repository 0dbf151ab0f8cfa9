from datetime import date, datetime
from typing import AbstractSet, Iterable, List

from .models import OneOffTask, Task


def is_overdue(task: Task, now: datetime, today: date) -> bool:
    """
    A task is overdue when its scheduled time has passed today.

    Tasks without a time are never overdue, carried-over one-offs included.
    A carried-over one-off that has a time is always overdue; one dated
    after today never is.
    """
    if task.time is None:
        return False
    if isinstance(task, OneOffTask):
        if task.date > today:
            return False
        if task.date < today:
            return True
    # Wall-clock comparison, the offset of `now` is irrelevant here
    scheduled = datetime.combine(today, task.time)
    return now.replace(tzinfo=None) > scheduled


def overdue_tasks(
    due: Iterable[Task],
    completed_ids: AbstractSet[str],
    now: datetime,
    today: date,
) -> List[Task]:
    return [
        task
        for task in due
        if task.id not in completed_ids and is_overdue(task, now, today)
    ]
