from datetime import datetime
import uuid
from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, Enum as SQLEnum, Float,
    ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from server.database import Base
from engine.enums import TaskKind

# =========================================================
# DATABASE MODELS
# =========================================================
def _new_task_id() -> str:
    return uuid.uuid4().hex

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    auth_credential = relationship("AuthCredential", back_populates="user", uselist=False, cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
    settings = relationship("UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan")
    delivery_token = relationship("DeliveryToken", back_populates="user", uselist=False, cascade="all, delete-orphan")

class AuthCredential(Base):
    __tablename__ = "auth_credentials"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="auth_credential")

class TokenBlacklist(Base):
    __tablename__ = "token_blacklist"
    id = Column(Integer, primary_key=True)
    token = Column(Text, unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("kind != 'oneoff' OR date IS NOT NULL", name="ck_tasks_oneoff_date"),
    )
    id = Column(String(32), primary_key=True, default=_new_task_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    kind = Column(SQLEnum(TaskKind), nullable=False, default=TaskKind.daily)
    time = Column(String(5))   # "HH:MM"
    date = Column(Date)        # one-off tasks only
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="tasks")

class Completion(Base):
    __tablename__ = "completions"
    __table_args__ = (
        UniqueConstraint("user_id", "day", "task_id", name="uq_completions_user_day_task"),
    )
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Date, nullable=False)
    task_id = Column(String(32), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class UserSettings(Base):
    __tablename__ = "user_settings"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    reminder_interval_minutes = Column(Integer, nullable=False, default=30)
    active_hours_only = Column(Boolean, nullable=False, default=True)
    aggressive_mode = Column(Boolean, nullable=False, default=False)
    notifications_enabled = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="settings")

class NotificationThrottle(Base):
    __tablename__ = "notification_throttle"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    # Epoch seconds
    last_overdue_reminder_at = Column(Float)
    last_pending_reminder_at = Column(Float)

class Streak(Base):
    __tablename__ = "streaks"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    count = Column(Integer, nullable=False, default=0)
    last_completed_date = Column(Date)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class DeliveryToken(Base):
    __tablename__ = "delivery_tokens"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    token = Column(Text)
    disabled = Column(Boolean, nullable=False, default=False)
    platform = Column(String(20), nullable=False, default="web")
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="delivery_token")
