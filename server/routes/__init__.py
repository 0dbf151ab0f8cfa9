from fastapi import APIRouter
from . import auth, tasks, settings, stats, notifications, prometheus

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(settings.router, prefix="/settings", tags=["Settings"])
router.include_router(stats.router, prefix="/stats", tags=["Stats"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(prometheus.router, prefix="/metrics", tags=["Metrics"])
