"""
Local reminder loop.

Runs for as long as a session is active: after a short initial delay it
evaluates the cached session state once per interval and shows a desktop
reminder when the throttle allows it. The next sleep only starts once the
previous tick has settled, so ticks never overlap.

To stop the loop, call stop(); it cancels the underlying asyncio task.
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional
import httpx
from engine.clock import local_now
from engine.evaluate import evaluate_user
from engine.throttle import ReminderDecision
from reminder_worker.scheduler_config import LOCAL_INITIAL_DELAY_SECONDS, LOCAL_TICK_SECONDS

logger = logging.getLogger(__name__)


class LocalTickLoop:
    def __init__(
        self,
        session,
        throttle_store,
        notifier,
        timezone_name: str,
        *,
        interval_seconds: float = LOCAL_TICK_SECONDS,
        initial_delay_seconds: float = LOCAL_INITIAL_DELAY_SECONDS,
    ) -> None:
        self._session = session
        self._throttle_store = throttle_store
        self._notifier = notifier
        self._timezone = timezone_name
        self._interval = max(0.0, float(interval_seconds))
        self._initial_delay = max(0.0, float(initial_delay_seconds))
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Local reminder loop stopped")

    async def run(self) -> None:
        logger.info(f"Local reminder loop started (every {self._interval:g}s)")
        await asyncio.sleep(self._initial_delay)
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Local reminder tick failed")
            await asyncio.sleep(self._interval)

    async def tick(self, now: Optional[datetime] = None) -> Optional[ReminderDecision]:
        now = local_now(self._timezone, now)
        snapshot = self._session.snapshot()
        # Completions cached for another day do not count today
        if snapshot.completed_day == now.date():
            completed_ids = snapshot.completed_ids
        else:
            completed_ids = frozenset()

        throttle = self._throttle_store.load()
        evaluation = evaluate_user(
            snapshot.tasks, completed_ids, snapshot.settings, throttle, snapshot.streak, now
        )

        if evaluation.streak != snapshot.streak:
            self._session.update_streak(evaluation.streak)
            try:
                await self._session.save_streak(evaluation.streak)
            except httpx.HTTPError as e:
                logger.warning(f"Could not push streak to server: {e}")

        decision = evaluation.decision
        if decision is None:
            return None

        delivered = await self._notifier.display(decision.title, decision.body, decision.tag)
        if not delivered:
            logger.info(f"Local {decision.category.value} reminder not delivered, will retry")
            return None

        self._throttle_store.save(decision.commit(throttle, now))
        logger.info(f"Local {decision.category.value} reminder shown: {decision.title}")
        return decision
