"""Test doubles and shared identities for ledger tests."""

from crowdledger.core.domain_types import SECONDS_PER_DAY
from crowdledger.core.errors import TransferFailedError

CREATOR = "creator"
ALICE = "alice"
BOB = "bob"
ONE_DAY = SECONDS_PER_DAY


class FailingPaymentRail:
    """Rejects every transfer, recording the attempts."""

    def __init__(self):
        self.attempts: list[dict] = []

    async def transfer(self, recipient: str, amount: int, reference: str) -> None:
        self.attempts.append(
            {"recipient": recipient, "amount": amount, "reference": reference},
        )
        raise TransferFailedError("rail offline")
