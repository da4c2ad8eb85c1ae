"""Funding Rule Enforcement — precondition checks for every ledger mutation.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Each check raises a typed LedgerRuleError/InvalidInputError on violation, returns None on success
    - validate_* chains the checks in a fixed order — first violation wins
    - Every accepted amount, running total and deadline fits its BIGINT column
    - Withdrawal checks AlreadyWithdrawn before CampaignInactive: active only ever
      goes false through a withdrawal, so a repeated withdrawal reports ALREADY_WITHDRAWN

Design Decisions:
    - Raise instead of returning error dicts: the ledger surfaces every failure
      to its caller unchanged, and the API maps CrowdLedgerError to HTTP in one place
"""

from crowdledger.core.campaign_state import CampaignSnapshot
from crowdledger.core.domain_types import MAX_AMOUNT, MAX_TIMESTAMP, SECONDS_PER_DAY
from crowdledger.core.errors import (
    AlreadyWithdrawnError,
    CampaignInactiveError,
    DeadlineNotReachedError,
    DeadlinePassedError,
    ErrorContext,
    GoalNotReachedError,
    GoalReachedError,
    InvalidInputError,
    NoContributionError,
    UnauthorizedError,
)


def _ctx(campaign: CampaignSnapshot, account: str | None = None) -> ErrorContext:
    return ErrorContext(campaign_id=campaign.id, account=account)


# ─── Creation ────────────────────────────────────────────────────

def validate_new_campaign(
    title: str, goal_amount: int, duration_days: int, now: int,
) -> None:
    """Goal and duration must be positive and storable, title must be non-blank."""
    if goal_amount <= 0:
        raise InvalidInputError(
            f"goal_amount must be positive, got {goal_amount}", "goal_amount",
        )
    if goal_amount > MAX_AMOUNT:
        raise InvalidInputError(
            f"goal_amount exceeds the maximum of {MAX_AMOUNT}", "goal_amount",
        )
    if duration_days <= 0:
        raise InvalidInputError(
            f"duration_days must be positive, got {duration_days}", "duration_days",
        )
    if now + duration_days * SECONDS_PER_DAY > MAX_TIMESTAMP:
        raise InvalidInputError(
            "duration_days puts the deadline beyond the supported range",
            "duration_days",
        )
    if not title or not title.strip():
        raise InvalidInputError("title cannot be empty", "title")


# ─── Contribution ────────────────────────────────────────────────

def check_active(campaign: CampaignSnapshot, account: str | None = None) -> None:
    if not campaign.active:
        raise CampaignInactiveError(_ctx(campaign, account))


def check_before_deadline(
    campaign: CampaignSnapshot, now: int, account: str | None = None,
) -> None:
    if campaign.deadline_passed(now):
        raise DeadlinePassedError(campaign.deadline, _ctx(campaign, account))


def check_positive_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidInputError(
            f"amount must be positive, got {amount}", "amount",
        )
    if amount > MAX_AMOUNT:
        raise InvalidInputError(
            f"amount exceeds the maximum of {MAX_AMOUNT}", "amount",
        )


def check_raised_capacity(campaign: CampaignSnapshot, amount: int) -> None:
    if campaign.raised_amount + amount > MAX_AMOUNT:
        raise InvalidInputError(
            "amount would push raised_amount beyond the supported range", "amount",
        )


def validate_contribution(
    campaign: CampaignSnapshot, amount: int, sender: str, now: int,
) -> None:
    check_active(campaign, sender)
    check_before_deadline(campaign, now, sender)
    check_positive_amount(amount)
    check_raised_capacity(campaign, amount)


# ─── Settlement ──────────────────────────────────────────────────

def check_creator(campaign: CampaignSnapshot, caller: str) -> None:
    if caller != campaign.creator:
        raise UnauthorizedError(
            "Only the campaign creator can withdraw funds.",
            _ctx(campaign, caller),
        )


def check_not_withdrawn(campaign: CampaignSnapshot, account: str | None = None) -> None:
    if campaign.withdrawn:
        raise AlreadyWithdrawnError(_ctx(campaign, account))


def check_deadline_reached(
    campaign: CampaignSnapshot, now: int, account: str | None = None,
) -> None:
    if not campaign.deadline_passed(now):
        raise DeadlineNotReachedError(campaign.deadline, _ctx(campaign, account))


def check_goal_reached(campaign: CampaignSnapshot, account: str | None = None) -> None:
    if not campaign.goal_reached:
        raise GoalNotReachedError(
            campaign.raised_amount, campaign.goal_amount, _ctx(campaign, account),
        )


def check_goal_missed(campaign: CampaignSnapshot, account: str | None = None) -> None:
    if campaign.goal_reached:
        raise GoalReachedError(
            campaign.raised_amount, campaign.goal_amount, _ctx(campaign, account),
        )


def validate_withdrawal(campaign: CampaignSnapshot, caller: str, now: int) -> None:
    """Withdrawal succeeds iff caller is creator, not yet withdrawn, deadline passed, goal met."""
    check_creator(campaign, caller)
    check_not_withdrawn(campaign, caller)
    check_active(campaign, caller)
    check_deadline_reached(campaign, now, caller)
    check_goal_reached(campaign, caller)


def validate_refund(
    campaign: CampaignSnapshot, caller: str, balance: int, now: int,
) -> None:
    """Refund succeeds iff deadline passed, goal missed and the caller still holds a balance."""
    check_deadline_reached(campaign, now, caller)
    check_goal_missed(campaign, caller)
    # Unreachable while the goal guard holds; kept as an explicit invariant.
    check_not_withdrawn(campaign, caller)
    if balance <= 0:
        raise NoContributionError(_ctx(campaign, caller))
