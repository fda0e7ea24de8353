import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "winetour.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.routers import bookings, invoices, lunch_orders, pricing, proposals, tour_offers

logger = logging.getLogger(__name__)


async def expire_tour_offers_job():
    from app.database import async_session_factory
    from app.services.booking_service import booking_service
    async with async_session_factory() as db:
        count = await booking_service.expire_tour_offers(db)
        if count:
            logger.info(f"Tour offers: {count} expired")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: launch background scheduler
    scheduler = None
    if settings.scheduler_enabled:
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.interval import IntervalTrigger

            scheduler = AsyncIOScheduler()
            scheduler.add_job(
                expire_tour_offers_job,
                IntervalTrigger(minutes=settings.offer_expiry_check_minutes),
                id="expire_tour_offers",
            )
            scheduler.start()
            logger.info("Background scheduler started")
        except Exception as e:
            logger.error(f"Scheduler failed to start: {e}")
            scheduler = None

    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set, outgoing email will be logged, not sent")

    yield

    # Shutdown
    from app.services.email_service import email_service
    await email_service.close()
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")


app = FastAPI(
    title="Walla Walla Travel",
    description="Wine tour booking and concierge API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(invoices.router, prefix="/api/invoices", tags=["invoices"])
app.include_router(lunch_orders.router, prefix="/api/lunch-orders", tags=["lunch-orders"])
app.include_router(tour_offers.router, prefix="/api/tour-offers", tags=["tour-offers"])
app.include_router(proposals.router, prefix="/api/proposals", tags=["proposals"])
app.include_router(pricing.router, prefix="/api/pricing", tags=["pricing"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "winetour"}
