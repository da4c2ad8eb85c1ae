"""Settlement Failures — state is committed before the transfer and never re-claimable.

Invariants:
    - A failed withdrawal transfer leaves withdrawn=True / active=False
    - A failed refund transfer leaves the balance at 0
    - The settlement row is marked failed with the rail's reason
    - No FundsWithdrawn / RefundIssued event is recorded for a failed transfer
    - A second attempt fails with the ordinary rule error, never re-transfers
"""

import pytest

from crowdledger.core.domain_types import LedgerEventType, SettlementStatus
from crowdledger.core.errors import (
    AlreadyWithdrawnError, NoContributionError, TransferFailedError,
)

from tests.services.fakes import ALICE, CREATOR, ONE_DAY


async def _fund(ledger, clock, goal, amount):
    cid = await ledger.create_campaign("Library", "Books", goal, 1, CREATOR)
    await ledger.contribute(cid, amount, ALICE)
    clock.advance(ONE_DAY)
    return cid


async def test_failed_withdrawal_keeps_flags_committed(
    failing_ledger, failing_rail, clock,
):
    cid = await _fund(failing_ledger, clock, goal=100, amount=100)

    with pytest.raises(TransferFailedError) as exc:
        await failing_ledger.withdraw_funds(cid, CREATOR)
    assert exc.value.context.campaign_id == cid
    assert exc.value.http_status == 502

    c = await failing_ledger.get_campaign_details(cid)
    assert c.withdrawn is True
    assert c.active is False

    with pytest.raises(AlreadyWithdrawnError):
        await failing_ledger.withdraw_funds(cid, CREATOR)
    assert len(failing_rail.attempts) == 1


async def test_failed_refund_keeps_balance_zeroed(
    failing_ledger, failing_rail, clock,
):
    cid = await _fund(failing_ledger, clock, goal=100, amount=40)

    with pytest.raises(TransferFailedError):
        await failing_ledger.request_refund(cid, ALICE)
    assert await failing_ledger.get_contribution(cid, ALICE) == 0

    with pytest.raises(NoContributionError):
        await failing_ledger.request_refund(cid, ALICE)
    assert len(failing_rail.attempts) == 1


async def test_failed_settlement_recorded_for_remediation(
    failing_ledger, failing_rail, clock,
):
    cid = await _fund(failing_ledger, clock, goal=100, amount=40)
    with pytest.raises(TransferFailedError):
        await failing_ledger.request_refund(cid, ALICE)

    failed = await failing_ledger.list_settlements(status=SettlementStatus.FAILED)
    assert len(failed) == 1
    assert failed[0].recipient == ALICE
    assert failed[0].amount == 40
    assert "rail offline" in failed[0].failure_reason
    assert failing_rail.attempts[0]["reference"] == f"settlement-{failed[0].id}"


async def test_failed_transfer_emits_no_settlement_event(
    failing_ledger, clock,
):
    cid = await _fund(failing_ledger, clock, goal=100, amount=40)
    with pytest.raises(TransferFailedError):
        await failing_ledger.request_refund(cid, ALICE)

    types = [e.event_type for e in await failing_ledger.list_events(cid)]
    assert LedgerEventType.REFUND_ISSUED.value not in types


async def test_failed_transfer_keeps_funds_in_escrow(failing_ledger, clock):
    cid = await _fund(failing_ledger, clock, goal=100, amount=40)
    with pytest.raises(TransferFailedError):
        await failing_ledger.request_refund(cid, ALICE)
    assert await failing_ledger.get_escrow_balance(cid) == 40
