"""Domain Types — rich types that replace bare primitives across the ledger.

Invariants:
    - CampaignId is a sequential int starting at 0
    - AccountId is the opaque caller identity supplied by the identity context
    - Amount is an integer in the smallest currency unit (no floats anywhere)
    - Timestamp is integer seconds since the epoch; one day is SECONDS_PER_DAY
    - Amounts and timestamps fit a signed 64-bit column, campaign ids a signed 32-bit one
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CampaignId = NewType("CampaignId", int)
AccountId = NewType("AccountId", str)
SettlementId = NewType("SettlementId", int)


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)          # smallest currency unit, >= 0
Timestamp = NewType("Timestamp", int)    # epoch seconds

SECONDS_PER_DAY: int = 86_400

# Storage bounds: amounts and timestamps are BIGINT, campaign ids are INTEGER
MAX_AMOUNT: int = 2**63 - 1
MAX_TIMESTAMP: int = 2**63 - 1
MAX_CAMPAIGN_ID: int = 2**31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class CampaignPhase(str, Enum):
    """Derived lifecycle phase — never stored, computed from fields + now."""
    OPEN = "open"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SETTLED = "settled"


class SettlementKind(str, Enum):
    """Which party a settlement releases escrow to."""
    WITHDRAWAL = "withdrawal"
    REFUND = "refund"


class SettlementStatus(str, Enum):
    """Settlement lifecycle — pending is committed before the transfer starts."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class LedgerEventType(str, Enum):
    """Audit events emitted by the ledger — maps to ledger_events.event_type."""
    CAMPAIGN_CREATED = "CampaignCreated"
    CONTRIBUTION_MADE = "ContributionMade"
    FUNDS_WITHDRAWN = "FundsWithdrawn"
    REFUND_ISSUED = "RefundIssued"
