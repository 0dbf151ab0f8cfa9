"""
Signed-in client session.

Holds an in-memory snapshot of the user's tasks, today's completions,
settings and streak. The tick loop only reads the snapshot; refresh() pulls
a new one from the API.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import FrozenSet, List, Optional
import httpx
from engine.enums import TaskKind
from engine.models import Settings, StreakState, Task, build_task, parse_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    tasks: List[Task]
    completed_ids: FrozenSet[str]
    completed_day: Optional[date]
    settings: Settings
    streak: StreakState


EMPTY_SNAPSHOT = SessionSnapshot(
    tasks=[],
    completed_ids=frozenset(),
    completed_day=None,
    settings=Settings(),
    streak=StreakState(),
)


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def task_from_json(data: dict) -> Task:
    return build_task(
        task_id=data["id"],
        name=data["name"],
        kind=TaskKind(data["kind"]),
        scheduled_time=parse_time(data.get("time")),
        scheduled_date=_parse_date(data.get("date")),
    )


class ApiSession:
    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=30)
        self._snapshot = EMPTY_SNAPSHOT
        self.user_key: Optional[str] = None

    async def login(self, email: str, password: str) -> None:
        resp = await self._client.post("/auth/login", json={"email": email, "password": password})
        resp.raise_for_status()
        token = resp.json()["access_token"]
        self._client.headers["Authorization"] = f"Bearer {token}"
        self.user_key = email.strip().lower().replace("@", "_at_")
        logger.info(f"Logged in as {email}")

    async def refresh(self) -> SessionSnapshot:
        tasks_resp = await self._client.get("/tasks/")
        tasks_resp.raise_for_status()
        today_resp = await self._client.get("/tasks/today")
        today_resp.raise_for_status()
        settings_resp = await self._client.get("/settings/")
        settings_resp.raise_for_status()

        tasks = []
        for item in tasks_resp.json():
            try:
                tasks.append(task_from_json(item))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed task {item.get('id')}: {e}")

        today = today_resp.json()
        streak = today.get("streak") or {}
        self._snapshot = SessionSnapshot(
            tasks=tasks,
            completed_ids=frozenset(today.get("completed_ids", [])),
            completed_day=_parse_date(today.get("date")),
            settings=Settings.from_mapping(settings_resp.json()),
            streak=StreakState(
                count=streak.get("count", 0),
                last_completed_date=_parse_date(streak.get("last_completed_date")),
            ),
        )
        logger.debug(f"Session refreshed: {len(tasks)} tasks")
        return self._snapshot

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def update_streak(self, streak: StreakState) -> None:
        self._snapshot = replace(self._snapshot, streak=streak)

    async def save_streak(self, streak: StreakState) -> None:
        last = streak.last_completed_date.isoformat() if streak.last_completed_date else None
        resp = await self._client.put(
            "/stats/streak",
            json={"count": streak.count, "last_completed_date": last},
        )
        resp.raise_for_status()

    async def close(self) -> None:
        await self._client.aclose()
