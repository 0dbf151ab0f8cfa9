"""
Day-granular completion streak.

Two transitions, always applied in this order:
- decay: a gap of more than one day resets the count
- advance: finishing every due task bumps the count, once per day
"""
from dataclasses import replace
from datetime import date, timedelta
from typing import AbstractSet, List

from .models import StreakState, Task


def apply_decay(state: StreakState, today: date) -> StreakState:
    yesterday = today - timedelta(days=1)
    if state.last_completed_date in (today, yesterday):
        return state
    if state.count == 0:
        return state
    return replace(state, count=0)


def all_completed(due: List[Task], completed_ids: AbstractSet[str]) -> bool:
    return len(due) > 0 and all(task.id in completed_ids for task in due)


def advance_streak(
    state: StreakState,
    due: List[Task],
    completed_ids: AbstractSet[str],
    today: date,
) -> StreakState:
    if state.last_completed_date == today:
        return state
    if not all_completed(due, completed_ids):
        return state
    return StreakState(count=state.count + 1, last_completed_date=today)


def evaluate_streak(
    state: StreakState,
    due: List[Task],
    completed_ids: AbstractSet[str],
    today: date,
) -> StreakState:
    decayed = apply_decay(state, today)
    return advance_streak(decayed, due, completed_ids, today)
