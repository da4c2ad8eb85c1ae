"""Settlement Routes — read-only view of escrow releases for remediation.

Invariants:
    - No retry endpoint: failed settlements are resolved outside the ledger
"""

from fastapi import APIRouter, Depends, Query

from crowdledger.api.deps import get_ledger
from crowdledger.core.domain_types import SettlementStatus
from crowdledger.schemas.campaign import SettlementResponse
from crowdledger.services.campaign_ledger import CampaignLedger

router = APIRouter(prefix="/api/v1/settlements", tags=["settlements"])


@router.get("", response_model=list[SettlementResponse])
async def list_settlements(
    status_filter: SettlementStatus | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    ledger: CampaignLedger = Depends(get_ledger),
):
    """List settlements, e.g. ?status=failed for transfers awaiting remediation."""
    return [
        SettlementResponse.model_validate(s)
        for s in await ledger.list_settlements(status=status_filter, limit=limit)
    ]
