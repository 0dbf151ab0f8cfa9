import asyncio
from datetime import date, datetime, time

from fakes import FakeNotifier, FakeSession
from client.local_store import LocalThrottleStore
from client.tick_loop import LocalTickLoop
from engine.enums import ReminderCategory
from engine.models import DailyTask, OneOffTask, Settings, StreakState, ThrottleState

TZ = "America/Phoenix"
TODAY = date(2024, 1, 5)
ON = Settings(notifications_enabled=True)


def at(hour, minute=0, day=5):
    return datetime(2024, 1, day, hour, minute)


def make_loop(tmp_path, session, notifier, **kwargs):
    store = LocalThrottleStore(tmp_path, "user")
    return LocalTickLoop(session, store, notifier, TZ, **kwargs), store


def test_tick_shows_overdue_reminder_and_commits(tmp_path):
    session = FakeSession(tasks=[DailyTask(id="s", name="Stretch", time=time(7, 0))], settings=ON)
    notifier = FakeNotifier()
    loop, store = make_loop(tmp_path, session, notifier)

    decision = asyncio.run(loop.tick(at(8)))

    assert decision.category == ReminderCategory.overdue
    assert notifier.calls == [("⚠️ 1 overdue task!", "Stretch", "taskmeup-overdue")]
    assert store.load().last_overdue_reminder_at is not None


def test_tick_is_throttled_between_intervals(tmp_path):
    session = FakeSession(tasks=[DailyTask(id="s", name="Stretch", time=time(7, 0))], settings=ON)
    notifier = FakeNotifier()
    loop, _ = make_loop(tmp_path, session, notifier)

    async def ticks():
        for minute in range(0, 31):
            await loop.tick(at(8, minute))

    asyncio.run(ticks())
    assert len(notifier.calls) == 2  # 08:00 and 08:30


def test_undelivered_notification_is_retried_next_tick(tmp_path):
    session = FakeSession(tasks=[DailyTask(id="r", name="Read")], settings=ON)
    notifier = FakeNotifier(delivered=False)
    loop, store = make_loop(tmp_path, session, notifier)

    assert asyncio.run(loop.tick(at(10))) is None
    assert store.load().last_pending_reminder_at is None

    notifier.delivered = True
    assert asyncio.run(loop.tick(at(10, 1))) is not None
    assert len(notifier.calls) == 2


def test_stale_completions_from_another_day_are_ignored(tmp_path):
    task = DailyTask(id="r", name="Read")
    session = FakeSession(
        tasks=[task], settings=ON,
        completed_ids=frozenset({"r"}), completed_day=date(2024, 1, 4),
    )
    notifier = FakeNotifier()
    loop, _ = make_loop(tmp_path, session, notifier)

    asyncio.run(loop.tick(at(10)))

    assert notifier.calls == [("📋 1 task pending", "Read", "taskmeup-reminder")]


def test_streak_advances_and_is_pushed(tmp_path):
    session = FakeSession(
        tasks=[DailyTask(id="a", name="A"), OneOffTask(id="b", name="B", date=TODAY)],
        completed_ids=frozenset({"a", "b"}), completed_day=TODAY,
        streak=StreakState(count=2, last_completed_date=date(2024, 1, 4)),
    )
    loop, _ = make_loop(tmp_path, session, FakeNotifier())

    asyncio.run(loop.tick(at(12)))
    asyncio.run(loop.tick(at(13)))

    expected = StreakState(count=3, last_completed_date=TODAY)
    assert session.snapshot().streak == expected
    assert session.saved_streaks == [expected]


def test_start_and_stop(tmp_path):
    session = FakeSession(tasks=[DailyTask(id="r", name="Read")], settings=Settings(notifications_enabled=True, active_hours_only=False))
    notifier = FakeNotifier()
    loop, _ = make_loop(tmp_path, session, notifier, interval_seconds=0.01, initial_delay_seconds=0)

    async def scenario():
        loop.start()
        assert loop.running
        await asyncio.sleep(0.1)
        await loop.stop()
        assert not loop.running

    asyncio.run(scenario())
    # Many ticks ran, the throttle let exactly one through
    assert len(notifier.calls) == 1


def test_local_store_round_trip_and_corrupt_file(tmp_path):
    store = LocalThrottleStore(tmp_path, "user")
    assert store.load().last_overdue_reminder_at is None

    store.path.write_text("not json", encoding="utf-8")
    assert store.load().last_pending_reminder_at is None

    store.path.write_text("[]", encoding="utf-8")
    assert store.load() == ThrottleState()

    store.path.write_text('{"last_reminder": "yesterday"}', encoding="utf-8")
    assert store.load() == ThrottleState()


def test_tick_recovers_from_malformed_state_file(tmp_path):
    session = FakeSession(tasks=[DailyTask(id="s", name="Stretch", time=time(7, 0))], settings=ON)
    notifier = FakeNotifier()
    loop, store = make_loop(tmp_path, session, notifier)
    store.path.write_text('{"last_overdue_reminder": "yesterday"}', encoding="utf-8")

    asyncio.run(loop.tick(at(8)))

    assert len(notifier.calls) == 1
    assert store.load().last_overdue_reminder_at is not None
