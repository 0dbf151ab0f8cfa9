"""
Task Store backed by the SQLAlchemy session.

Translates between ORM rows and the engine's immutable types. Every write
commits, so the sweep can persist one user's state without touching others.
"""
import logging
from datetime import date
from typing import FrozenSet, Iterable, List, Optional
from sqlalchemy.orm import Session
from server import models
from engine.clock import from_epoch, to_epoch
from engine.models import (
    DeliveryToken, Settings, StreakState, Task, ThrottleState, build_task, parse_time,
)

logger = logging.getLogger(__name__)

def row_to_task(row: models.Task) -> Task:
    return build_task(
        task_id=row.id,
        name=row.name,
        kind=row.kind,
        scheduled_time=parse_time(row.time),
        scheduled_date=row.date,
    )

class TaskStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    # ---- users ----

    def list_user_ids(self) -> List[int]:
        return [user_id for (user_id,) in self.db.query(models.User.id).order_by(models.User.id).all()]

    # ---- tasks ----

    def get_tasks(self, user_id: int) -> List[Task]:
        rows = self.db.query(models.Task).filter(
            models.Task.user_id == user_id
        ).order_by(models.Task.created_at, models.Task.id).all()
        return [row_to_task(row) for row in rows]

    # ---- completion records ----

    def get_completed_ids(self, user_id: int, day: date) -> FrozenSet[str]:
        rows = self.db.query(models.Completion.task_id).filter(
            models.Completion.user_id == user_id,
            models.Completion.day == day
        ).all()
        return frozenset(task_id for (task_id,) in rows)

    def set_completed_ids(self, user_id: int, day: date, task_ids: Iterable[str]) -> FrozenSet[str]:
        wanted = frozenset(task_ids)
        current = self.get_completed_ids(user_id, day)
        removed = current - wanted
        if removed:
            self.db.query(models.Completion).filter(
                models.Completion.user_id == user_id,
                models.Completion.day == day,
                models.Completion.task_id.in_(removed)
            ).delete(synchronize_session=False)
        for task_id in wanted - current:
            self.db.add(models.Completion(user_id=user_id, day=day, task_id=task_id))
        self.db.commit()
        return wanted

    def toggle_completion(self, user_id: int, day: date, task_id: str) -> FrozenSet[str]:
        completed = self.get_completed_ids(user_id, day)
        if task_id in completed:
            return self.set_completed_ids(user_id, day, completed - {task_id})
        return self.set_completed_ids(user_id, day, completed | {task_id})

    # ---- settings ----

    def get_settings(self, user_id: int) -> Settings:
        row = self.db.query(models.UserSettings).filter(models.UserSettings.user_id == user_id).first()
        if row is None:
            return Settings()
        return Settings.from_mapping({
            "reminder_interval_minutes": row.reminder_interval_minutes,
            "active_hours_only": row.active_hours_only,
            "aggressive_mode": row.aggressive_mode,
            "notifications_enabled": row.notifications_enabled,
        })

    def save_settings(self, user_id: int, settings: Settings) -> Settings:
        row = self.db.query(models.UserSettings).filter(models.UserSettings.user_id == user_id).first()
        if row is None:
            row = models.UserSettings(user_id=user_id)
            self.db.add(row)
        row.reminder_interval_minutes = settings.reminder_interval_minutes
        row.active_hours_only = settings.active_hours_only
        row.aggressive_mode = settings.aggressive_mode
        row.notifications_enabled = settings.notifications_enabled
        self.db.commit()
        return settings

    # ---- throttle state ----

    def get_throttle_state(self, user_id: int) -> ThrottleState:
        row = self.db.query(models.NotificationThrottle).filter(
            models.NotificationThrottle.user_id == user_id
        ).first()
        if row is None:
            return ThrottleState()
        return ThrottleState(
            last_overdue_reminder_at=from_epoch(row.last_overdue_reminder_at),
            last_pending_reminder_at=from_epoch(row.last_pending_reminder_at),
        )

    def save_throttle_state(self, user_id: int, state: ThrottleState) -> None:
        row = self.db.query(models.NotificationThrottle).filter(
            models.NotificationThrottle.user_id == user_id
        ).first()
        if row is None:
            row = models.NotificationThrottle(user_id=user_id)
            self.db.add(row)
        row.last_overdue_reminder_at = to_epoch(state.last_overdue_reminder_at)
        row.last_pending_reminder_at = to_epoch(state.last_pending_reminder_at)
        self.db.commit()

    # ---- streak ----

    def get_streak(self, user_id: int) -> StreakState:
        row = self.db.query(models.Streak).filter(models.Streak.user_id == user_id).first()
        if row is None:
            return StreakState()
        return StreakState(count=row.count or 0, last_completed_date=row.last_completed_date)

    def save_streak(self, user_id: int, streak: StreakState) -> None:
        row = self.db.query(models.Streak).filter(models.Streak.user_id == user_id).first()
        if row is None:
            row = models.Streak(user_id=user_id)
            self.db.add(row)
        row.count = streak.count
        row.last_completed_date = streak.last_completed_date
        self.db.commit()

    # ---- delivery token ----

    def get_delivery_token(self, user_id: int) -> Optional[DeliveryToken]:
        row = self.db.query(models.DeliveryToken).filter(models.DeliveryToken.user_id == user_id).first()
        if row is None:
            return None
        return DeliveryToken(token=row.token, disabled=bool(row.disabled), platform=row.platform or "web")

    def save_delivery_token(self, user_id: int, token: str, platform: str = "web") -> DeliveryToken:
        row = self.db.query(models.DeliveryToken).filter(models.DeliveryToken.user_id == user_id).first()
        if row is None:
            row = models.DeliveryToken(user_id=user_id)
            self.db.add(row)
        row.token = token
        row.disabled = False
        row.platform = platform
        self.db.commit()
        logger.info(f"Delivery token saved for user {user_id} ({platform})")
        return DeliveryToken(token=token, disabled=False, platform=platform)

    def disable_delivery_token(self, user_id: int) -> None:
        row = self.db.query(models.DeliveryToken).filter(models.DeliveryToken.user_id == user_id).first()
        if row is None:
            row = models.DeliveryToken(user_id=user_id)
            self.db.add(row)
        row.token = None
        row.disabled = True
        self.db.commit()
        logger.info(f"Delivery token disabled for user {user_id}")
