"""Boundary Protocols — contracts between the ledger and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Time and value transfer are reached only through these Protocol types
    - Implementations provided by infrastructure/ via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - PaymentRail.transfer is async because implementations do IO; it raises
      TransferFailedError on any failure and never retries on its own
"""

from typing import Protocol


class Clock(Protocol):
    """Source of the current time in integer epoch seconds."""
    def now(self) -> int: ...


class PaymentRail(Protocol):
    """Moves value out of escrow to a recipient account.

    reference is the settlement id, stable across any manual re-submission.
    """
    async def transfer(self, recipient: str, amount: int, reference: str) -> None: ...
