from typing import List
from datetime import datetime
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from server.schemas import TaskCreate, TaskResponse, TaskUpdate, TodayResponse
from server.models import Task, User
from server.dependencies import get_db, get_current_user, get_store
from server.store import TaskStore
from server.config import config
from engine.clock import local_now
from engine.due_set import progress, resolve_due_tasks
from engine.enums import TaskKind
from engine.models import format_time
from engine.overdue import is_overdue
from engine.streak import evaluate_streak

logger = logging.getLogger(__name__)

router = APIRouter()

def _get_owned_task(db: Session, task_id: str, user: User) -> Task:
    task = db.query(Task).filter(
        Task.id == task_id,
        Task.user_id == user.id  # Owner isolation
    ).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

def _refresh_streak(store: TaskStore, user_id: int, now: datetime):
    """Run the streak tracker over today's state and persist any change."""
    today = now.date()
    completed_ids = store.get_completed_ids(user_id, today)
    due = resolve_due_tasks(store.get_tasks(user_id), completed_ids, today)
    streak = store.get_streak(user_id)
    updated = evaluate_streak(streak, due, completed_ids, today)
    if updated != streak:
        store.save_streak(user_id, updated)
    return updated, due, completed_ids

# =========================================================
# TASK ENDPOINTS
# =========================================================
@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = Task(**task_data.dict(), user_id=current_user.id)
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info(f"Task {task.id} ({task.kind.value}) created for user {current_user.id}")
    return task

@router.get("/", response_model=List[TaskResponse])
def get_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return db.query(Task).filter(
        Task.user_id == current_user.id
    ).order_by(Task.created_at, Task.id).all()

@router.get("/today", response_model=TodayResponse)
def get_today(
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    now = local_now(config.TIMEZONE)
    today = now.date()
    streak, due, completed_ids = _refresh_streak(store, current_user.id, now)

    return {
        "date": today,
        "tasks": [
            {
                "id": task.id,
                "name": task.name,
                "kind": task.kind,
                "time": format_time(task.time),
                "date": getattr(task, "date", None),
                "completed": task.id in completed_ids,
                "overdue": task.id not in completed_ids and is_overdue(task, now, today),
            }
            for task in due
        ],
        "completed_ids": sorted(completed_ids),
        "progress": progress(due, completed_ids),
        "streak": {"count": streak.count, "last_completed_date": streak.last_completed_date},
    }

@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _get_owned_task(db, task_id, current_user)

@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = _get_owned_task(db, task_id, current_user)

    update_data = task_data.dict(exclude_unset=True)
    for key, value in update_data.items():
        setattr(task, key, value)

    if task.kind == TaskKind.daily:
        task.date = None
    elif task.date is None:
        db.rollback()
        raise HTTPException(status_code=422, detail="One-off tasks need a date")

    task.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(task)
    return task

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = _get_owned_task(db, task_id, current_user)
    db.delete(task)
    db.commit()

    store = TaskStore(db)
    today = local_now(config.TIMEZONE).date()
    completed_ids = store.get_completed_ids(current_user.id, today)
    if task_id in completed_ids:
        store.set_completed_ids(current_user.id, today, completed_ids - {task_id})

@router.post("/{task_id}/toggle", response_model=TodayResponse)
def toggle_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    _get_owned_task(db, task_id, current_user)

    store = TaskStore(db)
    today = local_now(config.TIMEZONE).date()
    store.toggle_completion(current_user.id, today, task_id)
    return get_today(store=store, current_user=current_user)
