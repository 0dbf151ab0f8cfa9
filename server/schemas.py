from typing import List, Optional
import datetime as dt
import re
from pydantic import BaseModel, Field, validator, root_validator
from engine.enums import TaskKind

# =========================================================
# PYDANTIC SCHEMAS
# =========================================================
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

def _check_time(value):
    if value in (None, ""):
        return None
    if not TIME_PATTERN.match(value):
        raise ValueError("time must be formatted as HH:MM")
    return value

def _clean_name(value):
    value = value.strip()
    if not value:
        raise ValueError("name must not be blank")
    return value

# Auth Schemas
class UserCreate(BaseModel):
    name: str
    email: str
    password: str = Field(..., min_length=6)

    @validator("email")
    def normalise_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

class UserLogin(BaseModel):
    email: str
    password: str

    @validator("email")
    def normalise_email(cls, v):
        return v.strip().lower()

class Token(BaseModel):
    access_token: str
    token_type: str

# Task Schemas
class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    kind: TaskKind = TaskKind.daily
    time: Optional[str] = None
    date: Optional[dt.date] = None

    @validator("time")
    def check_time(cls, v):
        return _check_time(v)

    @validator("name")
    def strip_name(cls, v):
        return _clean_name(v)

    @root_validator(skip_on_failure=True)
    def check_kind_date(cls, values):
        if values.get("kind") == TaskKind.oneoff and values.get("date") is None:
            raise ValueError("one-off tasks need a date")
        if values.get("kind") == TaskKind.daily:
            values["date"] = None
        return values

class TaskUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    kind: Optional[TaskKind] = None
    time: Optional[str] = None
    date: Optional[dt.date] = None

    @validator("time")
    def check_time(cls, v):
        return _check_time(v)

    @validator("name")
    def strip_name(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return _clean_name(v)

    @validator("kind")
    def require_kind(cls, v):
        if v is None:
            raise ValueError("kind cannot be null")
        return v

class TaskResponse(BaseModel):
    id: str
    name: str
    kind: TaskKind
    time: Optional[str]
    date: Optional[dt.date]
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True

class TodayTask(BaseModel):
    id: str
    name: str
    kind: TaskKind
    time: Optional[str]
    date: Optional[dt.date]
    completed: bool
    overdue: bool

class Progress(BaseModel):
    total: int
    completed: int
    pending: int
    percent: int

class StreakResponse(BaseModel):
    count: int
    last_completed_date: Optional[dt.date]

class StreakUpdate(BaseModel):
    count: int = Field(..., ge=0)
    last_completed_date: Optional[dt.date] = None

class TodayResponse(BaseModel):
    date: dt.date
    tasks: List[TodayTask]
    completed_ids: List[str]
    progress: Progress
    streak: StreakResponse

# Settings Schemas
class SettingsResponse(BaseModel):
    reminder_interval_minutes: int
    active_hours_only: bool
    aggressive_mode: bool
    notifications_enabled: bool

class SettingsUpdate(BaseModel):
    reminder_interval_minutes: Optional[int] = Field(None, ge=1)
    active_hours_only: Optional[bool] = None
    aggressive_mode: Optional[bool] = None
    notifications_enabled: Optional[bool] = None

# Notification Schemas
class DeliveryTokenUpdate(BaseModel):
    token: str = Field(..., min_length=1)
    platform: str = "web"

class DeliveryTokenResponse(BaseModel):
    registered: bool
    disabled: bool
    platform: Optional[str] = None
