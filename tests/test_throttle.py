from datetime import date, datetime, time, timedelta

import pytest
import pytz

from engine.enums import ReminderCategory
from engine.evaluate import evaluate_user
from engine.messages import compose_message
from engine.models import DailyTask, OneOffTask, Settings, StreakState, ThrottleState
from engine.throttle import decide_reminder, reminder_interval, should_fire

PHOENIX = pytz.timezone("America/Phoenix")
ON = Settings(notifications_enabled=True)


def at(hour, minute=0):
    return PHOENIX.localize(datetime(2024, 1, 5, hour, minute))


def test_disabled_notifications_never_fire():
    assert not should_fire(ReminderCategory.overdue, Settings(), ThrottleState(), at(10))


def test_outside_active_hours_never_fires():
    for hour in (23, 0, 7):
        assert not should_fire(ReminderCategory.overdue, ON, ThrottleState(), at(hour))
    assert should_fire(ReminderCategory.overdue, ON, ThrottleState(), at(8))
    assert should_fire(ReminderCategory.overdue, ON, ThrottleState(), at(21, 59))


def test_active_hours_can_be_switched_off():
    settings = Settings(notifications_enabled=True, active_hours_only=False)
    assert should_fire(ReminderCategory.pending, settings, ThrottleState(), at(23))


def test_aggressive_mode_halves_overdue_interval_only():
    settings = Settings(reminder_interval_minutes=30, aggressive_mode=True, notifications_enabled=True)
    assert reminder_interval(settings, ReminderCategory.overdue) == timedelta(minutes=15)
    assert reminder_interval(settings, ReminderCategory.pending) == timedelta(minutes=30)


def test_interval_boundary_is_inclusive():
    state = ThrottleState(last_overdue_reminder_at=at(10))
    assert not should_fire(ReminderCategory.overdue, ON, state, at(10, 29))
    assert should_fire(ReminderCategory.overdue, ON, state, at(10, 30))


def test_categories_are_throttled_independently():
    state = ThrottleState(last_overdue_reminder_at=at(10))
    assert should_fire(ReminderCategory.pending, ON, state, at(10, 1))


@pytest.mark.parametrize("aggressive, spacing", [(False, 30), (True, 15)])
def test_consecutive_overdue_reminders_respect_spacing(aggressive, spacing):
    settings = Settings(reminder_interval_minutes=30, aggressive_mode=aggressive, notifications_enabled=True)
    overdue = [DailyTask(id="d", name="Walk", time=time(8, 0))]
    state = ThrottleState()
    fired = []
    now = at(9)
    while now < at(21):
        decision = decide_reminder(settings, state, overdue, overdue, now)
        if decision is not None:
            state = decision.commit(state, now)
            fired.append(now)
        now += timedelta(minutes=1)

    assert len(fired) > 1
    gaps = [later - earlier for earlier, later in zip(fired, fired[1:])]
    assert min(gaps) >= timedelta(minutes=spacing)


def test_overdue_takes_precedence_over_pending():
    overdue = [DailyTask(id="d", name="Walk", time=time(8, 0))]
    pending = overdue + [DailyTask(id="p", name="Read")]
    decision = decide_reminder(ON, ThrottleState(), overdue, pending, at(10))
    assert decision.category == ReminderCategory.overdue
    assert decision.tag == "taskmeup-overdue"


def test_throttled_overdue_still_suppresses_pending():
    overdue = [DailyTask(id="d", name="Walk", time=time(8, 0))]
    pending = overdue + [DailyTask(id="p", name="Read")]
    state = ThrottleState(last_overdue_reminder_at=at(9, 55))
    assert decide_reminder(ON, state, overdue, pending, at(10)) is None


def test_pending_reminder_when_nothing_overdue():
    pending = [DailyTask(id="p", name="Read")]
    decision = decide_reminder(ON, ThrottleState(), [], pending, at(10))
    assert decision.category == ReminderCategory.pending
    assert decision.title == "📋 1 task pending"
    assert decision.body == "Read"


def test_nothing_to_remind_about():
    assert decide_reminder(ON, ThrottleState(), [], [], at(10)) is None


def test_commit_only_touches_the_fired_category():
    pending_at = at(9)
    decision = decide_reminder(ON, ThrottleState(last_pending_reminder_at=pending_at), [DailyTask(id="d", name="Walk")], [], at(10))
    state = decision.commit(ThrottleState(last_pending_reminder_at=pending_at), at(10))
    assert state.last_overdue_reminder_at == at(10)
    assert state.last_pending_reminder_at == pending_at


def test_message_lists_three_names_then_elides():
    tasks = [DailyTask(id=str(i), name=f"Task {i}") for i in range(5)]
    title, body = compose_message(ReminderCategory.overdue, tasks)
    assert title == "⚠️ 5 overdue tasks!"
    assert body == "Task 0, Task 1, Task 2 +2 more"


def test_message_singular_overdue():
    title, body = compose_message(ReminderCategory.overdue, [DailyTask(id="1", name="Walk")])
    assert title == "⚠️ 1 overdue task!"
    assert body == "Walk"


def test_late_evening_never_fires_regardless_of_overdue_count():
    tasks = [DailyTask(id=str(i), name=f"Task {i}", time=time(9, 0)) for i in range(10)]
    evaluation = evaluate_user(tasks, frozenset(), Settings(notifications_enabled=True), ThrottleState(), StreakState(), at(23))
    assert len(evaluation.overdue) == 10
    assert evaluation.decision is None


def test_evaluate_user_scenario():
    stretch = DailyTask(id="s", name="Stretch", time=time(7, 0))
    rent = OneOffTask(id="r", name="Pay rent", date=date(2024, 1, 1))
    evaluation = evaluate_user([stretch, rent], frozenset(), ON, ThrottleState(), StreakState(), at(8))
    assert evaluation.due == [stretch, rent]
    assert evaluation.overdue == [stretch]
    assert evaluation.pending == [stretch, rent]
    assert evaluation.decision.title == "⚠️ 1 overdue task!"
    assert evaluation.decision.body == "Stretch"


def test_settings_from_mapping_overlays_defaults():
    settings = Settings.from_mapping({"aggressive_mode": True, "unknown": 1})
    assert settings == Settings(reminder_interval_minutes=30, active_hours_only=True, aggressive_mode=True, notifications_enabled=False)
    assert Settings.from_mapping(None) == Settings()


@pytest.mark.parametrize("interval", [0, -5, "30", 1.5])
def test_malformed_interval_is_rejected(interval):
    with pytest.raises(ValueError):
        Settings.from_mapping({"reminder_interval_minutes": interval})
