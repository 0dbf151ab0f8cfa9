import asyncio
import logging
import sys
import httpx
from .config import config
from .local_store import LocalThrottleStore
from .notifier import DesktopNotifier
from .session import ApiSession
from .tick_loop import LocalTickLoop

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

async def _refresh_forever(session: ApiSession) -> None:
    while True:
        await asyncio.sleep(config.CLIENT_REFRESH_SECONDS)
        try:
            await session.refresh()
        except httpx.HTTPError as e:
            logger.warning(f"Session refresh failed, keeping cached state: {e}")

async def run_client() -> None:
    if not (config.CLIENT_EMAIL and config.CLIENT_PASSWORD):
        raise SystemExit("CLIENT_EMAIL and CLIENT_PASSWORD must be set")

    session = ApiSession(config.API_BASE)
    await session.login(config.CLIENT_EMAIL, config.CLIENT_PASSWORD)
    await session.refresh()

    loop = LocalTickLoop(
        session,
        LocalThrottleStore(config.CLIENT_STATE_DIR, session.user_key),
        DesktopNotifier(),
        config.TIMEZONE,
    )
    loop.start()
    refresher = asyncio.create_task(_refresh_forever(session))
    try:
        await asyncio.Event().wait()
    finally:
        refresher.cancel()
        await loop.stop()
        await session.close()

def main() -> None:
    try:
        asyncio.run(run_client())
    except KeyboardInterrupt:
        logger.info("Client stopped")
        sys.exit(0)

if __name__ == "__main__":
    main()
