from dataclasses import asdict, replace
from fastapi import APIRouter, Depends, HTTPException
from server.schemas import SettingsResponse, SettingsUpdate
from server.models import User
from server.dependencies import get_current_user, get_store
from server.store import TaskStore

router = APIRouter()

# =========================================================
# SETTINGS ENDPOINTS
# =========================================================
@router.get("/", response_model=SettingsResponse)
def get_settings(
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return asdict(store.get_settings(current_user.id))

@router.put("/", response_model=SettingsResponse)
def update_settings(
    settings_data: SettingsUpdate,
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    changes = {k: v for k, v in settings_data.dict(exclude_unset=True).items() if v is not None}
    try:
        settings = replace(store.get_settings(current_user.id), **changes)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return asdict(store.save_settings(current_user.id, settings))
