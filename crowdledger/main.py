"""CrowdLedger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers (api/error_handlers.py) map CrowdLedgerError → structured JSON
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Run with: uvicorn crowdledger.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crowdledger.api.deps import get_payment_rail
from crowdledger.api.error_handlers import register_error_handlers
from crowdledger.api.routes import campaigns, health, settlements
from crowdledger.config import get_settings
from crowdledger.infrastructure import database
from crowdledger.infrastructure.observability import setup_logging
from crowdledger.infrastructure.payment_rail import HttpPaymentRail

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("CrowdLedger API started")
    yield
    rail = get_payment_rail()
    if isinstance(rail, HttpPaymentRail):
        await rail.aclose()
    await manager.dispose()
    logger.info("CrowdLedger API shutting down")


app = FastAPI(
    title="CrowdLedger API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(campaigns.router)
app.include_router(settlements.router)

register_error_handlers(app)
