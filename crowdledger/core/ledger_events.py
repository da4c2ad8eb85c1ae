"""Ledger Events — payloads emitted for external observers and the audit log.

Invariants:
    - One event class per LedgerEventType, carrying exactly the documented fields
    - to_payload() output is JSON-serializable (ints and strs only)
"""

from dataclasses import dataclass, asdict
from typing import ClassVar

from crowdledger.core.domain_types import LedgerEventType


@dataclass(frozen=True)
class LedgerEvent:
    """Base for all ledger events."""
    event_type: ClassVar[LedgerEventType]

    campaign_id: int

    def to_payload(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CampaignCreated(LedgerEvent):
    event_type: ClassVar[LedgerEventType] = LedgerEventType.CAMPAIGN_CREATED

    creator: str
    title: str
    goal_amount: int
    deadline: int


@dataclass(frozen=True)
class ContributionMade(LedgerEvent):
    event_type: ClassVar[LedgerEventType] = LedgerEventType.CONTRIBUTION_MADE

    contributor: str
    amount: int


@dataclass(frozen=True)
class FundsWithdrawn(LedgerEvent):
    event_type: ClassVar[LedgerEventType] = LedgerEventType.FUNDS_WITHDRAWN

    creator: str
    amount: int


@dataclass(frozen=True)
class RefundIssued(LedgerEvent):
    event_type: ClassVar[LedgerEventType] = LedgerEventType.REFUND_ISSUED

    contributor: str
    amount: int
