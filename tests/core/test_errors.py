"""Error Hierarchy — codes, HTTP statuses and response envelope."""

import pytest

from crowdledger.core.errors import (
    AlreadyWithdrawnError,
    CampaignInactiveError,
    CampaignNotFoundError,
    CrowdLedgerError,
    DatabaseError,
    DeadlineNotReachedError,
    DeadlinePassedError,
    ErrorCategory,
    ErrorContext,
    GoalNotReachedError,
    GoalReachedError,
    InvalidInputError,
    NoContributionError,
    TransferFailedError,
    UnauthorizedError,
)


@pytest.mark.parametrize("error,code,status", [
    (InvalidInputError("bad", "amount"), "INVALID_INPUT", 400),
    (CampaignNotFoundError(1), "CAMPAIGN_NOT_FOUND", 404),
    (UnauthorizedError("no"), "UNAUTHORIZED", 403),
    (CampaignInactiveError(), "CAMPAIGN_INACTIVE", 409),
    (DeadlinePassedError(5), "DEADLINE_PASSED", 409),
    (DeadlineNotReachedError(5), "DEADLINE_NOT_REACHED", 409),
    (AlreadyWithdrawnError(), "ALREADY_WITHDRAWN", 409),
    (GoalNotReachedError(1, 2), "GOAL_NOT_REACHED", 409),
    (GoalReachedError(2, 2), "GOAL_REACHED", 409),
    (NoContributionError(), "NO_CONTRIBUTION", 409),
    (TransferFailedError("down"), "TRANSFER_FAILED", 502),
    (DatabaseError("x", "commit"), "DATABASE_ERROR", 503),
])
def test_codes_and_statuses(error, code, status):
    assert isinstance(error, CrowdLedgerError)
    assert error.code == code
    assert error.http_status == status


def test_not_found_carries_campaign_id_in_response():
    body = CampaignNotFoundError(12).to_response()["error"]
    assert body["code"] == "CAMPAIGN_NOT_FOUND"
    assert body["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert body["context"]["campaign_id"] == 12


def test_context_is_preserved():
    ctx = ErrorContext(campaign_id=3, account="alice")
    err = NoContributionError(ctx)
    assert err.to_response()["error"]["context"]["account"] == "alice"
