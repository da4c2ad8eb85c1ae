"""Error Hierarchy — typed, categorized exceptions for every ledger failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Rule violations (4xx) are never retried by the ledger; the caller may retry
      after satisfying the precondition (e.g. waiting for the deadline)
    - to_response() produces the REST envelope used by the global handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrowdLedgerError base: FastAPI global handler catches all
    - ErrorContext as dataclass: carries campaign/account ids for observability
      without coupling the core to the logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    campaign_id: int | None = None
    account: str | None = None
    settlement_id: int | None = None
    debug_info: dict[str, Any] | None = None


class CrowdLedgerError(Exception):
    """Base exception for all CrowdLedger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "campaign_id": self.context.campaign_id,
                    "account": self.context.account,
                    "settlement_id": self.context.settlement_id,
                },
            }
        }


# ─── Input & Lookup Errors ──────────────────────────────────────

class InvalidInputError(CrowdLedgerError):
    """Argument outside its allowed domain (non-positive amount, empty title)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class CampaignNotFoundError(CrowdLedgerError):
    """No campaign with the requested id."""
    def __init__(self, campaign_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.campaign_id = campaign_id
        super().__init__(
            f"Campaign '{campaign_id}' not found",
            "CAMPAIGN_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.campaign_id = campaign_id


class UnauthorizedError(CrowdLedgerError):
    """Caller identity missing or not allowed to perform the operation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Ledger Rule Errors (409) ───────────────────────────────────

class LedgerRuleError(CrowdLedgerError):
    """A funding rule rejected the operation. State is untouched."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class CampaignInactiveError(LedgerRuleError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Campaign is no longer active.", "CAMPAIGN_INACTIVE", context,
        )


class DeadlinePassedError(LedgerRuleError):
    def __init__(self, deadline: int, context: ErrorContext | None = None):
        super().__init__(
            f"Campaign deadline ({deadline}) has passed.",
            "DEADLINE_PASSED", context,
        )
        self.deadline = deadline


class DeadlineNotReachedError(LedgerRuleError):
    def __init__(self, deadline: int, context: ErrorContext | None = None):
        super().__init__(
            f"Campaign deadline ({deadline}) has not been reached yet.",
            "DEADLINE_NOT_REACHED", context,
        )
        self.deadline = deadline


class AlreadyWithdrawnError(LedgerRuleError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Funds have already been withdrawn by the creator.",
            "ALREADY_WITHDRAWN", context,
        )


class GoalNotReachedError(LedgerRuleError):
    def __init__(self, raised: int, goal: int, context: ErrorContext | None = None):
        super().__init__(
            f"Funding goal not reached ({raised}/{goal}).",
            "GOAL_NOT_REACHED", context,
        )
        self.raised = raised
        self.goal = goal


class GoalReachedError(LedgerRuleError):
    """Refunds only apply to campaigns that missed their goal."""
    def __init__(self, raised: int, goal: int, context: ErrorContext | None = None):
        super().__init__(
            f"Funding goal was reached ({raised}/{goal}); refunds are not available.",
            "GOAL_REACHED", context,
        )
        self.raised = raised
        self.goal = goal


class NoContributionError(LedgerRuleError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No refundable contribution for this account.",
            "NO_CONTRIBUTION", context,
        )


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class TransferFailedError(CrowdLedgerError):
    """Payment rail rejected or could not complete a transfer.

    Raised after the ledger state was committed: the settlement is marked
    failed and needs manual remediation, it is never re-claimable.
    """
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Transfer failed: {message}",
            "TRANSFER_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )


class DatabaseError(CrowdLedgerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
