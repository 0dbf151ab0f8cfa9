from fastapi import APIRouter, Depends
from engine.models import StreakState
from server.schemas import StreakResponse, StreakUpdate
from server.models import User
from server.dependencies import get_current_user, get_store
from server.store import TaskStore

router = APIRouter()

# =========================================================
# STATS ENDPOINTS
# =========================================================
@router.get("/", response_model=StreakResponse)
def get_stats(
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    streak = store.get_streak(current_user.id)
    return {"count": streak.count, "last_completed_date": streak.last_completed_date}

@router.put("/streak", response_model=StreakResponse)
def update_streak(
    streak_data: StreakUpdate,
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Written back by clients whose local loop advanced or reset the streak."""
    streak = StreakState(count=streak_data.count, last_completed_date=streak_data.last_completed_date)
    store.save_streak(current_user.id, streak)
    return {"count": streak.count, "last_completed_date": streak.last_completed_date}
