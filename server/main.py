import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import inspect
from server.config import config
from server.database import engine, Base
from server import models  # noqa: F401  registers tables on Base.metadata
from server.routes import router
from server.routes.prometheus import metrics_middleware
from reminder_worker.scheduler import start_scheduler, stop_scheduler

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# =========================================================
# FASTAPI APP
# =========================================================

app = FastAPI(title="TaskMeUp API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Prometheus middleware
app.middleware("http")(metrics_middleware)

# Include API Router
app.include_router(router)

# =========================================================
# STARTUP / SHUTDOWN
# =========================================================
@app.on_event("startup")
def init_database():
    existing_tables = set(inspect(engine).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing_tables]
    if missing:
        logger.info(f"Creating database tables: {missing}")
        Base.metadata.create_all(bind=engine)
    else:
        logger.info("Database tables already exist")

@app.on_event("startup")
def init_scheduler():
    if config.ENABLE_SCHEDULER:
        start_scheduler()
    else:
        logger.info("Reminder sweep disabled (ENABLE_SCHEDULER=false)")

@app.on_event("shutdown")
def shutdown_scheduler():
    stop_scheduler()
