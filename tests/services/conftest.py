"""Service test fixtures — async DB, frozen clock, payment rails, FastAPI client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Time only moves when a test calls clock.advance()
    - get_db / get_clock / get_payment_rail overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; FOR UPDATE is a no-op there
      and the ledger lock alone provides exclusion
"""

import pytest
from httpx import ASGITransport, AsyncClient

from crowdledger.api.deps import get_clock, get_payment_rail
from crowdledger.db.session import (
    create_engine_for_url, create_schema, create_session_factory, drop_schema,
)
from crowdledger.infrastructure.clock import FixedClock
from crowdledger.infrastructure.database import get_db
from crowdledger.infrastructure.payment_rail import InProcessPaymentRail
from crowdledger.main import app
from crowdledger.services.campaign_ledger import CampaignLedger

from tests.services.fakes import FailingPaymentRail


@pytest.fixture
async def test_engine():
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def rail():
    return InProcessPaymentRail()


@pytest.fixture
def failing_rail():
    return FailingPaymentRail()


@pytest.fixture
def ledger(test_db, clock, rail):
    return CampaignLedger(test_db, clock, rail)


@pytest.fixture
def failing_ledger(test_db, clock, failing_rail):
    return CampaignLedger(test_db, clock, failing_rail)


@pytest.fixture
async def client(test_session_factory, clock, rail):
    """FastAPI test client with DB, clock and payment rail overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_payment_rail] = lambda: rail

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
