from datetime import date, datetime, time

import pytz

from engine.due_set import resolve_due_tasks
from engine.models import DailyTask, OneOffTask
from engine.overdue import is_overdue, overdue_tasks

TODAY = date(2024, 1, 5)
PHOENIX = pytz.timezone("America/Phoenix")


def at(hour, minute=0, day=TODAY):
    return PHOENIX.localize(datetime(day.year, day.month, day.day, hour, minute))


def test_task_without_time_is_never_overdue():
    assert not is_overdue(DailyTask(id="d", name="Read"), at(23, 59), TODAY)


def test_stale_oneoff_without_time_is_not_overdue():
    task = OneOffTask(id="o", name="Pay rent", date=date(2023, 12, 1))
    assert not is_overdue(task, at(23, 0), TODAY)


def test_carried_over_oneoff_with_time_is_overdue_at_any_hour():
    task = OneOffTask(id="o", name="Call bank", date=date(2024, 1, 4), time=time(9, 0))
    assert is_overdue(task, at(0, 5), TODAY)
    assert is_overdue(task, at(8, 0), TODAY)


def test_daily_task_resets_each_day():
    task = DailyTask(id="d", name="Walk", time=time(8, 0))
    assert is_overdue(task, at(9, 0), TODAY)
    assert not is_overdue(task, at(7, 0), TODAY)
    # Just after midnight the next day the flag is back to false
    tomorrow = date(2024, 1, 6)
    assert not is_overdue(task, at(0, 1, day=tomorrow), tomorrow)


def test_scheduled_minute_itself_is_not_overdue():
    task = DailyTask(id="d", name="Walk", time=time(8, 0))
    assert not is_overdue(task, at(8, 0), TODAY)
    assert is_overdue(task, at(8, 1), TODAY)


def test_oneoff_for_today_uses_time_of_day():
    task = OneOffTask(id="o", name="Dentist", date=TODAY, time=time(14, 30))
    assert not is_overdue(task, at(14, 0), TODAY)
    assert is_overdue(task, at(15, 0), TODAY)


def test_future_oneoff_is_never_overdue():
    task = OneOffTask(id="f", name="Trip", date=date(2024, 1, 6), time=time(7, 0))
    assert not is_overdue(task, at(23, 59), TODAY)


def test_completed_tasks_are_not_reported_overdue():
    due = [DailyTask(id="d", name="Walk", time=time(8, 0))]
    assert overdue_tasks(due, frozenset({"d"}), at(12), TODAY) == []


def test_stretch_and_rent_scenario():
    stretch = DailyTask(id="s", name="Stretch", time=time(7, 0))
    rent = OneOffTask(id="r", name="Pay rent", date=date(2024, 1, 1))
    now = at(8, 0)

    due = resolve_due_tasks([stretch, rent], frozenset(), TODAY)
    assert due == [stretch, rent]
    assert overdue_tasks(due, frozenset(), now, TODAY) == [stretch]
    # Same inputs, same answer
    assert overdue_tasks(due, frozenset(), now, TODAY) == [stretch]
