"""
Engine data model.

Tasks are a closed variant: a task is either a DailyTask or a OneOffTask.
Everything here is immutable; updates return new instances.
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Any, ClassVar, FrozenSet, Mapping, Optional, Union

from .enums import ReminderCategory, TaskKind


def parse_time(value: Optional[str]) -> Optional[time]:
    """Parse an "HH:MM" string. Empty values mean "no scheduled time"."""
    if not value:
        return None
    hours, minutes = value.split(":")[:2]
    return time(int(hours), int(minutes))


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%H:%M")


@dataclass(frozen=True)
class DailyTask:
    id: str
    name: str
    time: Optional[time] = None

    kind: ClassVar[TaskKind] = TaskKind.daily


@dataclass(frozen=True)
class OneOffTask:
    id: str
    name: str
    date: date
    time: Optional[time] = None

    kind: ClassVar[TaskKind] = TaskKind.oneoff


Task = Union[DailyTask, OneOffTask]


def build_task(
    task_id: str,
    name: str,
    kind: TaskKind,
    scheduled_time: Optional[time] = None,
    scheduled_date: Optional[date] = None,
) -> Task:
    if kind == TaskKind.daily:
        return DailyTask(id=task_id, name=name, time=scheduled_time)
    if scheduled_date is None:
        raise ValueError(f"One-off task {task_id} has no scheduled date")
    return OneOffTask(id=task_id, name=name, date=scheduled_date, time=scheduled_time)


@dataclass(frozen=True)
class CompletionRecord:
    day: date
    task_ids: FrozenSet[str] = frozenset()

    def toggle(self, task_id: str) -> "CompletionRecord":
        if task_id in self.task_ids:
            return replace(self, task_ids=self.task_ids - {task_id})
        return replace(self, task_ids=self.task_ids | {task_id})

    def discard(self, task_id: str) -> "CompletionRecord":
        return replace(self, task_ids=self.task_ids - {task_id})


@dataclass(frozen=True)
class Settings:
    reminder_interval_minutes: int = 30
    active_hours_only: bool = True
    aggressive_mode: bool = False
    notifications_enabled: bool = False

    def __post_init__(self):
        interval = self.reminder_interval_minutes
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise ValueError(f"reminder_interval_minutes must be a positive integer, got {interval!r}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Settings":
        """Overlay stored values on top of the defaults. Unknown keys are ignored."""
        if not data:
            return cls()
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__ and v is not None}
        return cls(**known)


@dataclass(frozen=True)
class ThrottleState:
    last_overdue_reminder_at: Optional[datetime] = None
    last_pending_reminder_at: Optional[datetime] = None

    def last_fired(self, category: ReminderCategory) -> Optional[datetime]:
        if category == ReminderCategory.overdue:
            return self.last_overdue_reminder_at
        return self.last_pending_reminder_at

    def with_fired(self, category: ReminderCategory, at: datetime) -> "ThrottleState":
        if category == ReminderCategory.overdue:
            return replace(self, last_overdue_reminder_at=at)
        return replace(self, last_pending_reminder_at=at)


@dataclass(frozen=True)
class StreakState:
    count: int = 0
    last_completed_date: Optional[date] = None


@dataclass(frozen=True)
class DeliveryToken:
    token: Optional[str] = None
    disabled: bool = False
    platform: str = field(default="web")

    @property
    def usable(self) -> bool:
        return bool(self.token) and not self.disabled
