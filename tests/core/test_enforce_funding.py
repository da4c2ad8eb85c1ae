"""Funding Rule Enforcement — pure precondition checks and their order.

Tests cover:
    - validate_new_campaign rejects non-positive goal/duration and blank title
    - validate_contribution order: inactive, deadline, amount
    - validate_withdrawal succeeds only for creator, after deadline, goal met, not withdrawn
    - validate_refund succeeds only after deadline, goal missed, positive balance
"""

from dataclasses import replace

import pytest

from crowdledger.core.campaign_state import CampaignSnapshot
from crowdledger.core.domain_types import MAX_AMOUNT
from crowdledger.core.enforce_funding import (
    validate_contribution,
    validate_new_campaign,
    validate_refund,
    validate_withdrawal,
)
from crowdledger.core.errors import (
    AlreadyWithdrawnError,
    CampaignInactiveError,
    DeadlineNotReachedError,
    DeadlinePassedError,
    GoalNotReachedError,
    GoalReachedError,
    InvalidInputError,
    NoContributionError,
    UnauthorizedError,
)

DEADLINE = 10_000
BEFORE = DEADLINE - 1
AFTER = DEADLINE
NOW = 1_700_000_000


def _campaign(**overrides) -> CampaignSnapshot:
    base = CampaignSnapshot(
        id=7, creator="creator", title="T", description="",
        goal_amount=100, raised_amount=0, deadline=DEADLINE,
        withdrawn=False, active=True,
    )
    return replace(base, **overrides)


# ─── validate_new_campaign ───────────────────────────────────────

def test_new_campaign_accepts_valid_input():
    assert validate_new_campaign("Roof", 1, 1, NOW) is None


def test_goal_checked_before_title():
    with pytest.raises(InvalidInputError) as exc:
        validate_new_campaign("", 0, 1, NOW)
    assert exc.value.field == "goal_amount"


def test_blank_title_rejected():
    with pytest.raises(InvalidInputError) as exc:
        validate_new_campaign(" \t", 10, 1, NOW)
    assert exc.value.field == "title"


def test_goal_above_bigint_rejected():
    with pytest.raises(InvalidInputError) as exc:
        validate_new_campaign("Roof", MAX_AMOUNT + 1, 1, NOW)
    assert exc.value.field == "goal_amount"
    assert validate_new_campaign("Roof", MAX_AMOUNT, 1, NOW) is None


def test_duration_overflowing_deadline_rejected():
    with pytest.raises(InvalidInputError) as exc:
        validate_new_campaign("Roof", 10, 10**15, NOW)
    assert exc.value.field == "duration_days"


# ─── validate_contribution ───────────────────────────────────────

def test_contribution_accepted_while_open():
    assert validate_contribution(_campaign(), 5, "alice", BEFORE) is None


def test_inactive_checked_before_deadline_and_amount():
    settled = _campaign(active=False, withdrawn=True)
    with pytest.raises(CampaignInactiveError):
        validate_contribution(settled, 0, "alice", AFTER)


def test_deadline_checked_before_amount():
    with pytest.raises(DeadlinePassedError):
        validate_contribution(_campaign(), 0, "alice", AFTER)


def test_zero_amount_rejected():
    with pytest.raises(InvalidInputError):
        validate_contribution(_campaign(), 0, "alice", BEFORE)


# ─── validate_withdrawal ─────────────────────────────────────────

def test_withdrawal_allowed_when_goal_met_after_deadline():
    funded = _campaign(raised_amount=100)
    assert validate_withdrawal(funded, "creator", AFTER) is None


def test_withdrawal_by_other_account_unauthorized():
    funded = _campaign(raised_amount=100)
    with pytest.raises(UnauthorizedError) as exc:
        validate_withdrawal(funded, "alice", AFTER)
    assert exc.value.context.campaign_id == 7
    assert exc.value.context.account == "alice"


def test_withdrawal_before_deadline():
    with pytest.raises(DeadlineNotReachedError):
        validate_withdrawal(_campaign(raised_amount=500), "creator", BEFORE)


def test_withdrawal_goal_not_reached():
    with pytest.raises(GoalNotReachedError) as exc:
        validate_withdrawal(_campaign(raised_amount=99), "creator", AFTER)
    assert (exc.value.raised, exc.value.goal) == (99, 100)


def test_repeat_withdrawal_reports_already_withdrawn():
    settled = _campaign(raised_amount=100, withdrawn=True, active=False)
    with pytest.raises(AlreadyWithdrawnError):
        validate_withdrawal(settled, "creator", AFTER)


# ─── validate_refund ─────────────────────────────────────────────

def test_refund_allowed_for_failed_campaign():
    assert validate_refund(_campaign(raised_amount=30), "alice", 30, AFTER) is None


def test_refund_before_deadline():
    with pytest.raises(DeadlineNotReachedError):
        validate_refund(_campaign(raised_amount=30), "alice", 30, BEFORE)


def test_refund_when_goal_reached():
    with pytest.raises(GoalReachedError):
        validate_refund(_campaign(raised_amount=100), "alice", 30, AFTER)


def test_refund_goal_checked_before_withdrawn():
    settled = _campaign(raised_amount=100, withdrawn=True, active=False)
    with pytest.raises(GoalReachedError):
        validate_refund(settled, "alice", 30, AFTER)


def test_refund_after_withdrawal_guard():
    # Only reachable through an inconsistent snapshot; the guard still holds.
    odd = _campaign(raised_amount=10, withdrawn=True, active=False)
    with pytest.raises(AlreadyWithdrawnError):
        validate_refund(odd, "alice", 10, AFTER)


def test_refund_with_zero_balance():
    with pytest.raises(NoContributionError):
        validate_refund(_campaign(raised_amount=30), "bob", 0, AFTER)


# ─── storage bounds ──────────────────────────────────────────────

def test_contribution_above_bigint_rejected():
    with pytest.raises(InvalidInputError) as exc:
        validate_contribution(_campaign(), MAX_AMOUNT + 1, "alice", BEFORE)
    assert exc.value.field == "amount"


def test_contribution_overflowing_raised_total_rejected():
    nearly_full = _campaign(raised_amount=2**62)
    with pytest.raises(InvalidInputError):
        validate_contribution(nearly_full, 2**62, "alice", BEFORE)
    assert validate_contribution(nearly_full, 2**62 - 1, "alice", BEFORE) is None
