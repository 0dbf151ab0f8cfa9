from datetime import datetime, timezone
from typing import Optional

import pytz


def local_now(timezone_name: str, now: Optional[datetime] = None) -> datetime:
    """Current instant as an aware datetime in `timezone_name`."""
    tz = pytz.timezone(timezone_name)
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return tz.localize(now)
    return now.astimezone(tz)


def from_epoch(seconds: Optional[float]) -> Optional[datetime]:
    if seconds is None:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def to_epoch(moment: Optional[datetime]) -> Optional[float]:
    if moment is None:
        return None
    return moment.timestamp()
