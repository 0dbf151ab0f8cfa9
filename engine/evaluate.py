"""
One evaluation of a user's reminder state.

Both the server sweep and the client tick loop go through `evaluate_user`,
which is what keeps their verdicts identical for identical inputs.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Iterable, List, Optional

from .due_set import pending_tasks, resolve_due_tasks
from .models import Settings, StreakState, Task, ThrottleState
from .overdue import overdue_tasks
from .streak import evaluate_streak
from .throttle import ReminderDecision, decide_reminder


@dataclass(frozen=True)
class Evaluation:
    due: List[Task]
    overdue: List[Task]
    pending: List[Task]
    streak: StreakState
    decision: Optional[ReminderDecision]


def evaluate_user(
    tasks: Iterable[Task],
    completed_ids: AbstractSet[str],
    settings: Settings,
    throttle: ThrottleState,
    streak: StreakState,
    now: datetime,
) -> Evaluation:
    today = now.date()
    due = resolve_due_tasks(tasks, completed_ids, today)
    overdue = overdue_tasks(due, completed_ids, now, today)
    pending = pending_tasks(due, completed_ids)
    return Evaluation(
        due=due,
        overdue=overdue,
        pending=pending,
        streak=evaluate_streak(streak, due, completed_ids, today),
        decision=decide_reminder(settings, throttle, overdue, pending, now),
    )
