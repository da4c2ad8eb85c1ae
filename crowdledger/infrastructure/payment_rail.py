"""Payment Rails — PaymentRail implementations that move value out of escrow.

Invariants:
    - transfer() either returns normally (funds moved) or raises TransferFailedError
    - No automatic retries: a failed transfer is recorded by the ledger as a failed
      settlement and needs manual remediation
    - reference (settlement id) is forwarded so the rail can de-duplicate a
      manual re-submission

Design Decisions:
    - InProcessPaymentRail is the default when no rail URL is configured
      (single-process deployments, demos, tests)
    - HttpPaymentRail maps every httpx transport error and non-2xx status to
      TransferFailedError
"""

import logging

import httpx

from crowdledger.core.errors import ErrorContext, TransferFailedError

logger = logging.getLogger(__name__)


class InProcessPaymentRail:
    """Credits recipients in memory. payouts[recipient] is the total received."""

    def __init__(self):
        self.payouts: dict[str, int] = {}
        self.transfers: list[dict] = []

    async def transfer(self, recipient: str, amount: int, reference: str) -> None:
        if amount <= 0:
            raise TransferFailedError(f"non-positive amount {amount}")
        self.payouts[recipient] = self.payouts.get(recipient, 0) + amount
        self.transfers.append(
            {"recipient": recipient, "amount": amount, "reference": reference},
        )
        logger.info(
            f"In-process transfer of {amount} to {recipient}",
            extra={"account": recipient, "amount": amount},
        )


class HttpPaymentRail:
    """POSTs transfers to an external payment service."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )

    async def transfer(self, recipient: str, amount: int, reference: str) -> None:
        ctx = ErrorContext(account=recipient, debug_info={"reference": reference})
        try:
            response = await self._client.post(
                "/transfers",
                json={
                    "recipient": recipient,
                    "amount": amount,
                    "reference": reference,
                },
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Payment rail unreachable: {e}",
                extra={"account": recipient, "amount": amount},
            )
            raise TransferFailedError("payment rail unreachable", ctx) from e

        if response.is_error:
            logger.error(
                f"Payment rail rejected transfer: HTTP {response.status_code}",
                extra={"account": recipient, "amount": amount},
            )
            raise TransferFailedError(
                f"payment rail returned HTTP {response.status_code}", ctx,
            )

    async def aclose(self) -> None:
        await self._client.aclose()
