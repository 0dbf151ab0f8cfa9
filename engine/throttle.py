"""
Notification throttling.

Decides whether a reminder may fire now, given the user's settings and the
timestamps of the last reminders of each category. Nothing here reads the
clock or talks to a delivery channel: callers pass `now` in and commit the
returned state only after the delivery collaborator accepted the message.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from .enums import ReminderCategory
from .messages import compose_message, dedup_tag
from .models import Settings, Task, ThrottleState

ACTIVE_HOURS_START = 8
ACTIVE_HOURS_END = 22


def within_active_hours(settings: Settings, now: datetime) -> bool:
    if not settings.active_hours_only:
        return True
    return ACTIVE_HOURS_START <= now.hour < ACTIVE_HOURS_END


def reminder_interval(settings: Settings, category: ReminderCategory) -> timedelta:
    interval = timedelta(minutes=settings.reminder_interval_minutes)
    # Aggressive mode only speeds up overdue nagging
    if settings.aggressive_mode and category == ReminderCategory.overdue:
        interval = interval / 2
    return interval


def should_fire(
    category: ReminderCategory,
    settings: Settings,
    state: ThrottleState,
    now: datetime,
) -> bool:
    if not settings.notifications_enabled:
        return False
    if not within_active_hours(settings, now):
        return False
    last_fired = state.last_fired(category)
    if last_fired is None:
        return True
    return now - last_fired >= reminder_interval(settings, category)


@dataclass(frozen=True)
class ReminderDecision:
    category: ReminderCategory
    tasks: Tuple[Task, ...]
    title: str
    body: str
    tag: str

    def commit(self, state: ThrottleState, now: datetime) -> ThrottleState:
        """State to persist once the reminder was delivered."""
        return state.with_fired(self.category, now)


def decide_reminder(
    settings: Settings,
    state: ThrottleState,
    overdue: Sequence[Task],
    pending: Sequence[Task],
    now: datetime,
) -> Optional[ReminderDecision]:
    """
    Pick at most one reminder for this tick.

    Overdue dominates: when anything is overdue the pending category is not
    looked at, even if the overdue reminder itself is throttled.
    """
    if overdue:
        category, tasks = ReminderCategory.overdue, tuple(overdue)
    elif pending:
        category, tasks = ReminderCategory.pending, tuple(pending)
    else:
        return None

    if not should_fire(category, settings, state, now):
        return None

    title, body = compose_message(category, tasks)
    return ReminderDecision(
        category=category,
        tasks=tasks,
        title=title,
        body=body,
        tag=dedup_tag(category),
    )
