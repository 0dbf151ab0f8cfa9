from .enums import ReminderCategory, TaskKind
from .models import (
    CompletionRecord, DailyTask, DeliveryToken, OneOffTask, Settings,
    StreakState, Task, ThrottleState, build_task, format_time, parse_time,
)
from .due_set import pending_tasks, progress, resolve_due_tasks
from .overdue import is_overdue, overdue_tasks
from .streak import evaluate_streak
from .throttle import ReminderDecision, decide_reminder, should_fire
from .evaluate import Evaluation, evaluate_user
