import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from server.schemas import DeliveryTokenResponse, DeliveryTokenUpdate
from server.models import User
from server.dependencies import get_current_user, get_optional_user, get_push_sender, get_store
from server.store import TaskStore
from reminder_worker.diagnostics import send_test_notification
from reminder_worker.errors import AuthenticationRequired, DeliveryFailed, NotFound

logger = logging.getLogger(__name__)

router = APIRouter()

# =========================================================
# PUSH NOTIFICATION ENDPOINTS
# =========================================================
@router.get("/token", response_model=DeliveryTokenResponse)
def get_token_status(
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    delivery = store.get_delivery_token(current_user.id)
    if delivery is None:
        return {"registered": False, "disabled": False}
    return {"registered": delivery.usable, "disabled": delivery.disabled, "platform": delivery.platform}

@router.put("/token", response_model=DeliveryTokenResponse)
def register_token(
    token_data: DeliveryTokenUpdate,
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    delivery = store.save_delivery_token(current_user.id, token_data.token, token_data.platform)
    return {"registered": True, "disabled": False, "platform": delivery.platform}

@router.delete("/token", response_model=DeliveryTokenResponse)
def disable_token(
    store: TaskStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    store.disable_delivery_token(current_user.id)
    return {"registered": False, "disabled": True}

@router.post("/test")
def test_notification(
    current_user: Optional[User] = Depends(get_optional_user),
    store: TaskStore = Depends(get_store),
    send = Depends(get_push_sender)
):
    user_id = current_user.id if current_user else None
    try:
        return send_test_notification(user_id, store, send)
    except AuthenticationRequired as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DeliveryFailed as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
