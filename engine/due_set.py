"""
Due-set resolution: which of a user's tasks belong on today's agenda.
"""
from datetime import date
from typing import AbstractSet, Dict, Iterable, List

from .models import OneOffTask, Task


def is_due(task: Task, completed_ids: AbstractSet[str], today: date) -> bool:
    if not isinstance(task, OneOffTask):
        return True
    if task.date == today:
        return True
    # Carry-over: an unfinished one-off from an earlier day stays on the agenda
    return task.date < today and task.id not in completed_ids


def resolve_due_tasks(tasks: Iterable[Task], completed_ids: AbstractSet[str], today: date) -> List[Task]:
    return [task for task in tasks if is_due(task, completed_ids, today)]


def pending_tasks(due: Iterable[Task], completed_ids: AbstractSet[str]) -> List[Task]:
    return [task for task in due if task.id not in completed_ids]


def progress(due: List[Task], completed_ids: AbstractSet[str]) -> Dict[str, int]:
    total = len(due)
    completed = sum(1 for task in due if task.id in completed_ids)
    percent = round(completed / total * 100) if total > 0 else 0
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "percent": percent,
    }
