"""API Dependencies — caller identity, collaborators and the ledger per request.

Invariants:
    - Caller identity comes only from the configured identity header, set by the
      authenticating proxy; missing or blank -> UnauthorizedError
    - Clock and payment rail are process singletons; the ledger is per request
      (one DB session each)

Design Decisions:
    - lru_cache singletons as FastAPI dependencies: tests swap them through
      app.dependency_overrides without monkeypatching modules
"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from crowdledger.config import get_settings
from crowdledger.core.errors import UnauthorizedError
from crowdledger.core.repository_protocols import Clock, PaymentRail
from crowdledger.infrastructure.clock import SystemClock
from crowdledger.infrastructure.database import get_db
from crowdledger.infrastructure.payment_rail import (
    HttpPaymentRail, InProcessPaymentRail,
)
from crowdledger.services.campaign_ledger import CampaignLedger


def get_caller(request: Request) -> str:
    """Verified caller identity from the authentication context."""
    header = get_settings().identity_header
    caller = (request.headers.get(header) or "").strip()
    if not caller:
        raise UnauthorizedError(f"Missing caller identity header '{header}'")
    return caller


@lru_cache
def get_clock() -> Clock:
    return SystemClock()


@lru_cache
def get_payment_rail() -> PaymentRail:
    settings = get_settings()
    if settings.payment_rail_url:
        return HttpPaymentRail(
            settings.payment_rail_url,
            timeout_seconds=settings.payment_rail_timeout_seconds,
        )
    return InProcessPaymentRail()


def get_ledger(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    payment_rail: PaymentRail = Depends(get_payment_rail),
) -> CampaignLedger:
    return CampaignLedger(db, clock, payment_rail)
