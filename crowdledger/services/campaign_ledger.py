"""Campaign Ledger — owns campaign, contribution and balance state; settles escrow.

Invariants:
    - Every mutation runs under the ledger lock and (on PostgreSQL) a row lock:
      load -> check (core/enforce_funding.py) -> apply -> commit, nothing interleaves
    - A rejected operation rolls back and leaves no trace
    - Settlement order is fixed: flip withdrawn/active or zero the balance, insert a
      pending Settlement, COMMIT, and only then call the payment rail
    - A failed transfer marks the settlement failed and raises TransferFailedError;
      the committed flags stay, so the same funds can never be claimed twice
    - raised_amount is never decremented (refunds included); escrow balance is
      contributions minus completed settlements
    - Campaign ids come from the seeded ledger_counters row, starting at 0;
      ids outside the INTEGER column range are NotFound without a query

Design Decisions:
    - One asyncio.Lock per event loop: uvicorn runs a single loop per worker, and the
      row lock covers the multi-worker case on PostgreSQL
    - The transfer runs inside the lock: one state-changing operation completes,
      transfer attempt included, before the next begins
    - Events for settlements are recorded only after the transfer succeeds
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crowdledger.core.campaign_state import CampaignSnapshot
from crowdledger.core.domain_types import (
    MAX_CAMPAIGN_ID, SECONDS_PER_DAY, SettlementKind, SettlementStatus,
)
from crowdledger.core.enforce_funding import (
    validate_contribution,
    validate_new_campaign,
    validate_refund,
    validate_withdrawal,
)
from crowdledger.core.errors import CampaignNotFoundError, TransferFailedError
from crowdledger.core.ledger_events import (
    CampaignCreated,
    ContributionMade,
    FundsWithdrawn,
    LedgerEvent,
    RefundIssued,
)
from crowdledger.core.repository_protocols import Clock, PaymentRail
from crowdledger.models.campaign import Campaign
from crowdledger.models.contribution import Contribution, ContributorBalance
from crowdledger.models.ledger_counter import (
    CAMPAIGN_ID_COUNTER, LedgerCounter, seed_counter_statement,
)
from crowdledger.models.ledger_event import LedgerEventRecord
from crowdledger.models.settlement import Settlement

logger = logging.getLogger(__name__)

_ledger_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
    weakref.WeakKeyDictionary()
)


def ledger_lock() -> asyncio.Lock:
    """Return the ledger-wide lock for the running event loop."""
    loop = asyncio.get_running_loop()
    lock = _ledger_locks.get(loop)
    if lock is None:
        lock = _ledger_locks[loop] = asyncio.Lock()
    return lock


class CampaignLedger:
    """Create/contribute/withdraw/refund/query over one DB session."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock,
        payment_rail: PaymentRail,
        lock: asyncio.Lock | None = None,
    ):
        self._db = db
        self._clock = clock
        self._payment_rail = payment_rail
        self._lock = lock

    def now(self) -> int:
        return self._clock.now()

    # ─── Mutations ───────────────────────────────────────────────

    async def create_campaign(
        self,
        title: str,
        description: str,
        goal_amount: int,
        duration_days: int,
        creator: str,
    ) -> int:
        """Open a new campaign and return its id."""
        now = self._clock.now()
        validate_new_campaign(title, goal_amount, duration_days, now)
        async with self._exclusive():
            campaign_id = await self._next_campaign_id()
            deadline = now + duration_days * SECONDS_PER_DAY
            self._db.add(Campaign(
                id=campaign_id,
                creator=creator,
                title=title.strip(),
                description=description,
                goal_amount=goal_amount,
                raised_amount=0,
                deadline=deadline,
                withdrawn=False,
                active=True,
            ))
            self._record_event(CampaignCreated(
                campaign_id=campaign_id,
                creator=creator,
                title=title.strip(),
                goal_amount=goal_amount,
                deadline=deadline,
            ))
            await self._db.commit()
        return campaign_id

    async def contribute(
        self, campaign_id: int, amount: int, sender: str,
    ) -> CampaignSnapshot:
        """Escrow `amount` from `sender`. Returns the updated campaign."""
        async with self._exclusive():
            campaign = await self._load_campaign(campaign_id, for_update=True)
            validate_contribution(
                campaign.to_snapshot(), amount, sender, self._clock.now(),
            )

            balance = await self._load_balance(campaign_id, sender, for_update=True)
            if balance is None:
                balance = ContributorBalance(
                    campaign_id=campaign_id, contributor=sender, amount=0,
                )
                self._db.add(balance)
            balance.amount += amount
            campaign.raised_amount += amount
            self._db.add(Contribution(
                campaign_id=campaign_id, contributor=sender, amount=amount,
            ))
            self._record_event(ContributionMade(
                campaign_id=campaign_id, contributor=sender, amount=amount,
            ))
            await self._db.commit()
            return campaign.to_snapshot()

    async def withdraw_funds(self, campaign_id: int, caller: str) -> Settlement:
        """Release the whole raised amount to the creator. Returns the completed settlement."""
        async with self._exclusive():
            campaign = await self._load_campaign(campaign_id, for_update=True)
            validate_withdrawal(campaign.to_snapshot(), caller, self._clock.now())

            campaign.withdrawn = True
            campaign.active = False
            settlement = Settlement(
                campaign_id=campaign_id,
                kind=SettlementKind.WITHDRAWAL.value,
                recipient=campaign.creator,
                amount=campaign.raised_amount,
                status=SettlementStatus.PENDING.value,
            )
            self._db.add(settlement)
            await self._db.commit()

            await self._settle(settlement, FundsWithdrawn(
                campaign_id=campaign_id,
                creator=campaign.creator,
                amount=settlement.amount,
            ))
            return settlement

    async def request_refund(self, campaign_id: int, caller: str) -> Settlement:
        """Return the caller's balance from a failed campaign. Returns the completed settlement."""
        async with self._exclusive():
            campaign = await self._load_campaign(campaign_id, for_update=True)
            balance = await self._load_balance(campaign_id, caller, for_update=True)
            owed = balance.amount if balance is not None else 0
            validate_refund(campaign.to_snapshot(), caller, owed, self._clock.now())

            balance.amount = 0
            settlement = Settlement(
                campaign_id=campaign_id,
                kind=SettlementKind.REFUND.value,
                recipient=caller,
                amount=owed,
                status=SettlementStatus.PENDING.value,
            )
            self._db.add(settlement)
            await self._db.commit()

            await self._settle(settlement, RefundIssued(
                campaign_id=campaign_id, contributor=caller, amount=owed,
            ))
            return settlement

    # ─── Queries ─────────────────────────────────────────────────

    async def get_campaign_details(self, campaign_id: int) -> CampaignSnapshot:
        campaign = await self._load_campaign(campaign_id)
        return campaign.to_snapshot()

    async def get_contribution(self, campaign_id: int, contributor: str) -> int:
        """Tracked refundable balance; 0 when the account never contributed."""
        await self._load_campaign(campaign_id)
        balance = await self._load_balance(campaign_id, contributor)
        return balance.amount if balance is not None else 0

    async def get_contributor_count(self, campaign_id: int) -> int:
        """Number of contribution records (repeat contributions count)."""
        await self._load_campaign(campaign_id)
        result = await self._db.execute(
            select(func.count(Contribution.id))
            .where(Contribution.campaign_id == campaign_id),
        )
        return result.scalar_one()

    async def get_contributions(self, campaign_id: int) -> list[Contribution]:
        await self._load_campaign(campaign_id)
        result = await self._db.execute(
            select(Contribution)
            .where(Contribution.campaign_id == campaign_id)
            .order_by(Contribution.id),
        )
        return list(result.scalars().all())

    async def get_escrow_balance(self, campaign_id: int) -> int:
        """Funds still held for the campaign: contributions minus completed settlements."""
        await self._load_campaign(campaign_id)
        contributed = await self._db.execute(
            select(func.coalesce(func.sum(Contribution.amount), 0))
            .where(Contribution.campaign_id == campaign_id),
        )
        released = await self._db.execute(
            select(func.coalesce(func.sum(Settlement.amount), 0))
            .where(
                Settlement.campaign_id == campaign_id,
                Settlement.status == SettlementStatus.COMPLETED.value,
            ),
        )
        return int(contributed.scalar_one()) - int(released.scalar_one())

    async def list_campaigns(
        self, limit: int = 20, offset: int = 0,
    ) -> list[CampaignSnapshot]:
        result = await self._db.execute(
            select(Campaign).order_by(Campaign.id.desc()).limit(limit).offset(offset),
        )
        return [c.to_snapshot() for c in result.scalars().all()]

    async def list_events(self, campaign_id: int) -> list[LedgerEventRecord]:
        await self._load_campaign(campaign_id)
        result = await self._db.execute(
            select(LedgerEventRecord)
            .where(LedgerEventRecord.campaign_id == campaign_id)
            .order_by(LedgerEventRecord.id),
        )
        return list(result.scalars().all())

    async def list_settlements(
        self, status: SettlementStatus | None = None, limit: int = 100,
    ) -> list[Settlement]:
        query = select(Settlement).order_by(Settlement.id)
        if status is not None:
            query = query.where(Settlement.status == status.value)
        result = await self._db.execute(query.limit(limit))
        return list(result.scalars().all())

    # ─── Internals ───────────────────────────────────────────────

    @asynccontextmanager
    async def _exclusive(self):
        """Serialize mutations; roll back whatever the failed step left open."""
        lock = self._lock or ledger_lock()
        async with lock:
            try:
                yield
            except Exception:
                await self._db.rollback()
                raise

    async def _next_campaign_id(self) -> int:
        counter = await self._lock_counter()
        if counter is None:
            # Schema created without the seed row. ON CONFLICT lets concurrent
            # workers race here; the loser then locks the winner's row.
            await self._db.execute(seed_counter_statement(self._dialect_name()))
            counter = await self._lock_counter()
        value = counter.next_value
        counter.next_value = value + 1
        return value

    async def _lock_counter(self) -> LedgerCounter | None:
        result = await self._db.execute(
            select(LedgerCounter)
            .where(LedgerCounter.name == CAMPAIGN_ID_COUNTER)
            .with_for_update()
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    def _dialect_name(self) -> str:
        return self._db.get_bind().dialect.name

    async def _load_campaign(
        self, campaign_id: int, for_update: bool = False,
    ) -> Campaign:
        if not 0 <= campaign_id <= MAX_CAMPAIGN_ID:
            raise CampaignNotFoundError(campaign_id)
        query = select(Campaign).where(Campaign.id == campaign_id)
        if for_update:
            query = query.with_for_update()
        result = await self._db.execute(
            query.execution_options(populate_existing=True),
        )
        campaign = result.scalar_one_or_none()
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)
        return campaign

    async def _load_balance(
        self, campaign_id: int, contributor: str, for_update: bool = False,
    ) -> ContributorBalance | None:
        query = select(ContributorBalance).where(
            ContributorBalance.campaign_id == campaign_id,
            ContributorBalance.contributor == contributor,
        )
        if for_update:
            query = query.with_for_update()
        result = await self._db.execute(
            query.execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    def _record_event(self, event: LedgerEvent) -> None:
        self._db.add(LedgerEventRecord(
            campaign_id=event.campaign_id,
            event_type=event.event_type.value,
            payload=event.to_payload(),
        ))
        logger.info(
            f"{event.event_type.value} on campaign {event.campaign_id}",
            extra={
                "campaign_id": event.campaign_id,
                "event_type": event.event_type.value,
            },
        )

    async def _settle(self, settlement: Settlement, event: LedgerEvent) -> None:
        """Transfer a committed settlement and record its outcome."""
        try:
            await self._payment_rail.transfer(
                settlement.recipient,
                settlement.amount,
                reference=settlement.reference,
            )
        except TransferFailedError as e:
            settlement.status = SettlementStatus.FAILED.value
            settlement.failure_reason = e.message
            settlement.completed_at = datetime.now(timezone.utc)
            await self._db.commit()
            logger.error(
                f"Settlement {settlement.id} failed; manual remediation required",
                extra={
                    "campaign_id": settlement.campaign_id,
                    "settlement_id": settlement.id,
                    "account": settlement.recipient,
                    "amount": settlement.amount,
                    "error_code": e.code,
                },
            )
            e.context.campaign_id = settlement.campaign_id
            e.context.settlement_id = settlement.id
            raise

        settlement.status = SettlementStatus.COMPLETED.value
        settlement.completed_at = datetime.now(timezone.utc)
        self._record_event(event)
        await self._db.commit()
