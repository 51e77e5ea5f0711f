from datetime import date

import httpx
import pytest

from bandarmology.domain.exceptions import UpstreamRequestError
from bandarmology.infrastructure.market_data.stockbit_client import StockbitClient


def _client(handler) -> StockbitClient:
    return StockbitClient(
        base_url="https://exodus.example.test/",
        token="secret-token",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_market_detector_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"data": {"broker_summary": {"brokers_buy": []}}})

    client = _client(handler)
    payload = await client.fetch_market_detector("BBCA", date(2024, 5, 1), date(2024, 5, 3))
    await client.close()

    assert payload["data"]["broker_summary"]["brokers_buy"] == []
    assert seen["path"] == "/marketdetectors/BBCA"
    assert seen["params"]["from"] == "2024-05-01"
    assert seen["params"]["to"] == "2024-05-03"
    assert seen["params"]["transaction_type"] == "TRANSACTION_TYPE_NET"
    assert seen["auth"] == "Bearer secret-token"


@pytest.mark.asyncio
async def test_orderbook_and_info_paths():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"data": {}})

    client = _client(handler)
    await client.fetch_orderbook("TLKM")
    await client.fetch_emiten_info("TLKM")
    await client.close()

    assert paths == [
        "/company-price-feed/v2/orderbook/companies/TLKM",
        "/emitten/TLKM/info",
    ]


@pytest.mark.asyncio
async def test_non_200_raises_upstream_error():
    client = _client(lambda request: httpx.Response(401, text="token expired"))
    with pytest.raises(UpstreamRequestError) as excinfo:
        await client.fetch_orderbook("BBCA")
    await client.close()

    assert excinfo.value.status_code == 401
    assert "orderbook" in str(excinfo.value)


@pytest.mark.asyncio
async def test_invalid_json_raises_upstream_error():
    client = _client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(UpstreamRequestError, match="invalid JSON"):
        await client.fetch_emiten_info("BBCA")
    await client.close()


@pytest.mark.asyncio
async def test_transport_error_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _client(handler)
    with pytest.raises(UpstreamRequestError, match="timed out"):
        await client.fetch_market_detector("BBCA", date(2024, 5, 1), date(2024, 5, 1))
    await client.close()
