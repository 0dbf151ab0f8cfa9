"""
Task Reminder Sweep

Periodically walks every user, works out which of their tasks are due and
overdue, and sends a push reminder when the throttle allows it.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
import pytz
from apscheduler.schedulers.background import BackgroundScheduler

from engine.clock import local_now
from engine.evaluate import evaluate_user
from server.database import SessionLocal
from server.store import TaskStore
from .metrics import REMINDER_FAILURES, REMINDERS_SENT, SWEEP_DURATION
from .scheduler_config import SWEEP_INTERVAL_MINUTES, SWEEP_TIMEZONE
from .send import send_push_notification

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    users: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0


def check_user(store: TaskStore, user_id: int, now: datetime, send: Callable) -> str:
    """
    Evaluate one user and send at most one reminder.

    Returns "sent", "skipped" or "failed" (delivery rejected). Anything
    raised propagates to the caller, which isolates users from each other.
    """
    delivery = store.get_delivery_token(user_id)
    if delivery is None or not delivery.usable:
        logger.debug(f"User {user_id}: no usable push token, skipping")
        return "skipped"

    today = now.date()
    tasks = store.get_tasks(user_id)
    completed_ids = store.get_completed_ids(user_id, today)
    settings = store.get_settings(user_id)
    throttle = store.get_throttle_state(user_id)
    streak = store.get_streak(user_id)

    evaluation = evaluate_user(tasks, completed_ids, settings, throttle, streak, now)

    if evaluation.streak != streak:
        store.save_streak(user_id, evaluation.streak)

    decision = evaluation.decision
    if decision is None:
        return "skipped"

    result, status_code = send(delivery.token, decision.title, decision.body)
    if status_code != 200:
        REMINDER_FAILURES.labels(category=decision.category.value).inc()
        logger.error(f"User {user_id}: {decision.category.value} reminder rejected ({status_code}): {result}")
        return "failed"

    # Only a delivered reminder moves the throttle forward
    store.save_throttle_state(user_id, decision.commit(throttle, now))
    REMINDERS_SENT.labels(category=decision.category.value).inc()
    logger.info(f"User {user_id}: sent {decision.category.value} reminder '{decision.title}'")
    return "sent"


def run_sweep(
    now: Optional[datetime] = None,
    session_factory=SessionLocal,
    send: Callable = send_push_notification,
) -> SweepReport:
    """
    Main job: check every user once. Called periodically by the scheduler.

    Each user gets a fresh session; a failure for one user is logged and the
    sweep moves on to the next.
    """
    started = time.monotonic()
    now = local_now(SWEEP_TIMEZONE, now)
    report = SweepReport()

    db = session_factory()
    try:
        user_ids = TaskStore(db).list_user_ids()
    finally:
        db.close()

    logger.info(f"Running reminder sweep for {len(user_ids)} users at {now.isoformat()}")

    for user_id in user_ids:
        report.users += 1
        db = session_factory()
        try:
            outcome = check_user(TaskStore(db), user_id, now, send)
        except Exception:
            db.rollback()
            report.failed += 1
            logger.exception(f"Reminder check failed for user {user_id}")
            continue
        finally:
            db.close()

        if outcome == "sent":
            report.sent += 1
        elif outcome == "failed":
            report.failed += 1
        else:
            report.skipped += 1

    SWEEP_DURATION.observe(time.monotonic() - started)
    logger.info(
        f"Reminder sweep complete: {report.sent} sent, {report.skipped} skipped, {report.failed} failed"
    )
    return report


# Global scheduler instance
scheduler = BackgroundScheduler(timezone=pytz.timezone(SWEEP_TIMEZONE))


def start_scheduler():
    """Start the periodic reminder sweep."""
    scheduler.add_job(
        run_sweep,
        'interval',
        minutes=SWEEP_INTERVAL_MINUTES,
        id='reminder_sweep_job',
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )
    scheduler.start()
    logger.info(f"Scheduler started: reminder sweep every {SWEEP_INTERVAL_MINUTES} min ({SWEEP_TIMEZONE})")


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
