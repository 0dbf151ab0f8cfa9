"""
User-initiated test notification.

Unlike the sweep, this is synchronous and surfaces every error to the caller.
"""
import logging
from typing import Callable, Mapping, Optional, Tuple
from engine.messages import TEST_NOTIFICATION_BODY, TEST_NOTIFICATION_TITLE
from .errors import AuthenticationRequired, DeliveryFailed, NotFound

logger = logging.getLogger(__name__)

PushSender = Callable[[str, str, str], Tuple[Mapping, int]]

def send_test_notification(user_id: Optional[int], store, send: PushSender) -> dict:
    if user_id is None:
        raise AuthenticationRequired("Must be logged in")

    delivery = store.get_delivery_token(user_id)
    if delivery is None or not delivery.usable:
        raise NotFound("No push token registered")

    result, status_code = send(delivery.token, TEST_NOTIFICATION_TITLE, TEST_NOTIFICATION_BODY)
    if status_code != 200:
        logger.error(f"Test notification failed for user {user_id}: {result}")
        raise DeliveryFailed(status_code, result)

    logger.info(f"Test notification sent to user {user_id}")
    return {"success": True}
