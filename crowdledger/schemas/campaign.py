"""Campaign Schemas — Pydantic models for the campaign ledger API.

Invariants:
    - Numeric fields are plain ints: positivity is a ledger rule (INVALID_INPUT),
      not a schema rule, so the API and the ledger report the same error
    - Response models read ORM rows / snapshots via from_attributes
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CampaignCreate(BaseModel):
    """Campaign creation request. The creator is the authenticated caller."""
    title: str = Field(max_length=200)
    description: str = Field("", max_length=10_000)
    goal_amount: int
    duration_days: int


class ContributionCreate(BaseModel):
    amount: int


class CampaignResponse(BaseModel):
    """Campaign snapshot plus derived phase."""
    id: int
    creator: str
    title: str
    description: str
    goal_amount: int
    raised_amount: int
    deadline: int
    withdrawn: bool
    active: bool
    phase: str


class CampaignCreated(BaseModel):
    id: int


class ContributionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contributor: str
    amount: int
    created_at: datetime


class ContributionList(BaseModel):
    campaign_id: int
    contributor_count: int
    contributions: list[ContributionRecord]


class ContributorBalanceResponse(BaseModel):
    campaign_id: int
    contributor: str
    amount: int


class SettlementResponse(BaseModel):
    """Result of a withdrawal, a refund, or a row in the settlement listing."""
    model_config = ConfigDict(from_attributes=True)

    campaign_id: int
    kind: str
    recipient: str
    amount: int
    status: str
    id: int
    reference: str
    failure_reason: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None


class EscrowResponse(BaseModel):
    campaign_id: int
    escrow_balance: int
    raised_amount: int


class LedgerEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    event_type: str
    payload: dict
    created_at: datetime
