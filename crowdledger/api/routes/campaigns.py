"""Campaign Routes — HTTP surface of the campaign ledger.

Invariants:
    - Mutating routes require the caller identity (api/deps.get_caller)
    - Read routes are public and side-effect free
    - Ledger errors propagate to the global handler; routes never catch them
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from crowdledger.api.deps import get_caller, get_ledger
from crowdledger.core.campaign_state import CampaignSnapshot
from crowdledger.schemas.campaign import (
    CampaignCreate,
    CampaignCreated,
    CampaignResponse,
    ContributionCreate,
    ContributionList,
    ContributionRecord,
    ContributorBalanceResponse,
    EscrowResponse,
    LedgerEventResponse,
    SettlementResponse,
)
from crowdledger.services.campaign_ledger import CampaignLedger

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/campaigns", tags=["campaigns"])


def _to_response(snapshot: CampaignSnapshot, now: int) -> CampaignResponse:
    return CampaignResponse(**snapshot.to_dict(now))


@router.post(
    "", response_model=CampaignCreated, status_code=status.HTTP_201_CREATED,
)
async def create_campaign(
    body: CampaignCreate,
    caller: str = Depends(get_caller),
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Open a new campaign owned by the caller."""
    campaign_id = await ledger.create_campaign(
        title=body.title,
        description=body.description,
        goal_amount=body.goal_amount,
        duration_days=body.duration_days,
        creator=caller,
    )
    return CampaignCreated(id=campaign_id)


@router.get("", response_model=list[CampaignResponse])
async def list_campaigns(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    ledger: CampaignLedger = Depends(get_ledger),
):
    now = ledger.now()
    return [
        _to_response(c, now)
        for c in await ledger.list_campaigns(limit=limit, offset=offset)
    ]


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: int, ledger: CampaignLedger = Depends(get_ledger),
):
    snapshot = await ledger.get_campaign_details(campaign_id)
    return _to_response(snapshot, ledger.now())


@router.post(
    "/{campaign_id}/contributions",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
)
async def contribute(
    campaign_id: int,
    body: ContributionCreate,
    caller: str = Depends(get_caller),
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Escrow a contribution from the caller."""
    snapshot = await ledger.contribute(campaign_id, body.amount, caller)
    return _to_response(snapshot, ledger.now())


@router.get("/{campaign_id}/contributions", response_model=ContributionList)
async def list_contributions(
    campaign_id: int, ledger: CampaignLedger = Depends(get_ledger),
):
    records = await ledger.get_contributions(campaign_id)
    return ContributionList(
        campaign_id=campaign_id,
        contributor_count=await ledger.get_contributor_count(campaign_id),
        contributions=[ContributionRecord.model_validate(r) for r in records],
    )


@router.get(
    "/{campaign_id}/contributions/{contributor}",
    response_model=ContributorBalanceResponse,
)
async def get_contribution(
    campaign_id: int,
    contributor: str,
    ledger: CampaignLedger = Depends(get_ledger),
):
    amount = await ledger.get_contribution(campaign_id, contributor)
    return ContributorBalanceResponse(
        campaign_id=campaign_id, contributor=contributor, amount=amount,
    )


@router.post("/{campaign_id}/withdrawal", response_model=SettlementResponse)
async def withdraw_funds(
    campaign_id: int,
    caller: str = Depends(get_caller),
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Creator releases escrow of a succeeded campaign."""
    settlement = await ledger.withdraw_funds(campaign_id, caller)
    return SettlementResponse.model_validate(settlement)


@router.post("/{campaign_id}/refund", response_model=SettlementResponse)
async def request_refund(
    campaign_id: int,
    caller: str = Depends(get_caller),
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Contributor reclaims their balance from a failed campaign."""
    settlement = await ledger.request_refund(campaign_id, caller)
    return SettlementResponse.model_validate(settlement)


@router.get("/{campaign_id}/escrow", response_model=EscrowResponse)
async def get_escrow(
    campaign_id: int, ledger: CampaignLedger = Depends(get_ledger),
):
    snapshot = await ledger.get_campaign_details(campaign_id)
    return EscrowResponse(
        campaign_id=campaign_id,
        escrow_balance=await ledger.get_escrow_balance(campaign_id),
        raised_amount=snapshot.raised_amount,
    )


@router.get("/{campaign_id}/events", response_model=list[LedgerEventResponse])
async def list_events(
    campaign_id: int, ledger: CampaignLedger = Depends(get_ledger),
):
    return [
        LedgerEventResponse.model_validate(e)
        for e in await ledger.list_events(campaign_id)
    ]
