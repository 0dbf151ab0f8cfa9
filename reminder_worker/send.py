import json
import logging
from typing import Mapping, Tuple
import requests
from .config import config

logger = logging.getLogger(__name__)

def _api_url() -> str:
    return f"{config.PUSH_API_BASE}/projects/{config.PUSH_PROJECT_ID}/messages:send"

def _get_push_payload(token: str, title: str, body: str) -> str:
    return json.dumps(
        {
            "message": {
                "token": token,
                "notification": {"title": title, "body": body},
                "webpush": {
                    "notification": {
                        "icon": config.PUSH_ICON,
                        "badge": config.PUSH_ICON,
                        "vibrate": [200, 100, 200],
                    }
                },
            }
        }
    )

def send_push_notification(
    token: str,
    title: str,
    body: str
) -> Tuple[Mapping, int]:
    """
    Sends a push notification to one device token.

    Returns the provider response and its status code; 200 means the
    message was accepted. Failures are reported, never retried here.
    """
    if not (config.PUSH_ACCESS_TOKEN and config.PUSH_PROJECT_ID and token):
        logger.error("Missing push configuration or device token")
        return {"status": "error", "message": "Missing configuration"}, 500

    headers = {
        "Content-type": "application/json",
        "Authorization": f"Bearer {config.PUSH_ACCESS_TOKEN}",
    }

    resp = None
    try:
        resp = requests.post(
            _api_url(),
            data=_get_push_payload(token, title, body),
            headers=headers,
            timeout=config.PUSH_TIMEOUT_SECONDS
        )
        resp.raise_for_status()
    except requests.Timeout:
        logger.error("Push request timed out")
        return {"status": "error", "message": "Request timed out"}, 408

    except requests.RequestException as e:
        logger.error(f"Push send error: {e}")
        if resp is not None:
            try:
                return resp.json(), resp.status_code
            except ValueError:
                return {"status": "error", "message": resp.text}, resp.status_code
        return {"status": "error", "message": "Failed to send message"}, 500

    try:
        return resp.json(), resp.status_code
    except ValueError:
        # Accepted, the provider just sent no JSON body
        return {}, resp.status_code
