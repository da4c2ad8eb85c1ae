"""Payment Rails — in-process credits and HTTP error mapping (httpx.MockTransport)."""

import httpx
import pytest

from crowdledger.core.errors import TransferFailedError
from crowdledger.infrastructure.payment_rail import (
    HttpPaymentRail, InProcessPaymentRail,
)


async def test_in_process_rail_accumulates_payouts():
    rail = InProcessPaymentRail()
    await rail.transfer("alice", 30, "settlement-1")
    await rail.transfer("alice", 5, "settlement-2")
    assert rail.payouts == {"alice": 35}
    assert [t["reference"] for t in rail.transfers] == [
        "settlement-1", "settlement-2",
    ]


async def test_in_process_rail_rejects_non_positive_amount():
    with pytest.raises(TransferFailedError):
        await InProcessPaymentRail().transfer("alice", 0, "settlement-1")


def _rail(handler) -> HttpPaymentRail:
    client = httpx.AsyncClient(
        base_url="http://rail.test", transport=httpx.MockTransport(handler),
    )
    return HttpPaymentRail("http://rail.test", client=client)


async def test_http_rail_posts_transfer():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, request.read()))
        return httpx.Response(201, json={"ok": True})

    rail = _rail(handler)
    await rail.transfer("creator", 110, "settlement-9")
    await rail.aclose()

    path, body = seen[0]
    assert path == "/transfers"
    assert b'"reference":"settlement-9"' in body.replace(b" ", b"")


async def test_http_rail_maps_error_status():
    rail = _rail(lambda request: httpx.Response(503))
    with pytest.raises(TransferFailedError) as exc:
        await rail.transfer("creator", 110, "settlement-9")
    assert "503" in exc.value.message
    await rail.aclose()


async def test_http_rail_maps_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    rail = _rail(handler)
    with pytest.raises(TransferFailedError):
        await rail.transfer("creator", 110, "settlement-9")
    await rail.aclose()
