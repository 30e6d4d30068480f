import logging

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from proppool.api.router import api_router
from proppool.config import get_settings
from proppool.core.scheduler import start_scheduler, stop_scheduler
from proppool.db import SessionLocal
from proppool.services.catalog import seed_if_empty

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router)


@app.on_event("startup")
def startup_event() -> None:
    try:
        with SessionLocal() as session:
            summary = seed_if_empty(session)
        logger.info("Catalog on startup: %s", summary)
    except SQLAlchemyError:
        logger.exception("Catalog seed skipped; run the Alembic migrations first")
    start_scheduler(settings)


@app.on_event("shutdown")
def shutdown_event() -> None:
    stop_scheduler()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "environment": settings.app_env}
