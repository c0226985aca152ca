"""StayGuard – stay compliance API (Schengen 90/180 and per-visa overstay)."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stayguard.config import get_settings
from stayguard.database import Base, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from stayguard.models import StayRecordRow  # noqa: F401
from stayguard.routers import compliance, jurisdictions, travelers, notifications

log = logging.getLogger("uvicorn.error")

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(compliance.router)
app.include_router(jurisdictions.router)
app.include_router(travelers.router)
app.include_router(notifications.router)


@app.on_event("startup")
def startup():
    log.info(
        "[Rules] max_days=%d window_days=%d lookahead_days=%d max_scan_range_days=%d",
        settings.rule_max_days, settings.rule_window_days, settings.lookahead_days, settings.max_scan_range_days,
    )
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        log.warning("Database startup failed (tables skipped). Check DATABASE_URL and network. Error: %s", e)

    if settings.compliance_cron_enabled:
        from apscheduler.schedulers.background import BackgroundScheduler
        from stayguard.services.stay_timer import run_compliance_check_job

        scheduler = BackgroundScheduler()
        scheduler.add_job(run_compliance_check_job, "cron", hour=settings.compliance_cron_hour, minute=0)
        scheduler.start()
        log.info("[Scheduler] daily compliance check at %02d:00", settings.compliance_cron_hour)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
