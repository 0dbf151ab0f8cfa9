from typing import Sequence, Tuple

from .enums import ReminderCategory
from .models import Task

MAX_LISTED_TASKS = 3

OVERDUE_TAG = "taskmeup-overdue"
PENDING_TAG = "taskmeup-reminder"

TEST_NOTIFICATION_TITLE = "🎉 Test Notification"
TEST_NOTIFICATION_BODY = "Background notifications are working!"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def list_task_names(tasks: Sequence[Task], limit: int = MAX_LISTED_TASKS) -> str:
    names = ", ".join(task.name for task in tasks[:limit])
    if len(tasks) > limit:
        names += f" +{len(tasks) - limit} more"
    return names


def compose_message(category: ReminderCategory, tasks: Sequence[Task]) -> Tuple[str, str]:
    """Return (title, body) for a reminder about `tasks`."""
    if category == ReminderCategory.overdue:
        title = f"⚠️ {_plural(len(tasks), 'overdue task')}!"
    else:
        title = f"📋 {_plural(len(tasks), 'task')} pending"
    return title, list_task_names(tasks)


def dedup_tag(category: ReminderCategory) -> str:
    return OVERDUE_TAG if category == ReminderCategory.overdue else PENDING_TAG
