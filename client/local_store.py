"""
Client-side throttle state, one small JSON file per user.

This is the local loop's own copy; it is never synchronised with the
server's throttle table.
"""
import json
import logging
from pathlib import Path
from typing import Union
from engine.clock import from_epoch, to_epoch
from engine.models import ThrottleState

logger = logging.getLogger(__name__)

class LocalThrottleStore:
    def __init__(self, state_dir: Union[str, Path], user_key: str) -> None:
        self._path = Path(state_dir) / f"throttle_{user_key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ThrottleState:
        if not self._path.exists():
            return ThrottleState()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return ThrottleState(
                last_overdue_reminder_at=from_epoch(data.get("last_overdue_reminder")),
                last_pending_reminder_at=from_epoch(data.get("last_reminder")),
            )
        except (OSError, ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Unreadable throttle state at {self._path}, starting fresh: {e}")
            return ThrottleState()

    def save(self, state: ThrottleState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "last_overdue_reminder": to_epoch(state.last_overdue_reminder_at),
            "last_reminder": to_epoch(state.last_pending_reminder_at),
        }
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self._path)
