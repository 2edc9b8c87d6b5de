import json
from datetime import date

import httpx
import pytest

from flights.errors import TraceFetchError
from flights.ingestors.trace import AdsbExchangeTraceFetcher
from flights.models import Flying, Grounded


@pytest.mark.anyio
async def test_trace_fetcher_parses_day_trace():
    payload = {
        "icao": "4ca7b6",
        "timestamp": 1704456000,
        "trace": [
            [0, 53.42, -6.27, "ground", 0.0],
            [300, 53.80, -5.90, 24000, 420.0],
        ],
    }
    seen: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request):
        seen["request"] = request
        return httpx.Response(200, json=payload)

    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example",
        cookie="adsbx_sid=abc",
        transport=httpx.MockTransport(handler),
    )

    positions = await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5))

    assert [type(p) for p in positions] == [Grounded, Flying]
    request = seen["request"]
    assert request.url.path == "/globe_history/2024/01/05/traces/b6/trace_full_4ca7b6.json"
    assert request.headers["cookie"] == "adsbx_sid=abc"
    assert request.headers["referer"] == "https://globe.example/?icao=4ca7b6"


@pytest.mark.anyio
async def test_trace_fetcher_treats_missing_trace_as_empty_day():
    transport = httpx.MockTransport(lambda request: httpx.Response(404, text="not found"))
    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example", cookie="", transport=transport
    )

    assert await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5)) == []


@pytest.mark.anyio
async def test_trace_fetcher_raises_on_server_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))
    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example", cookie="", transport=transport
    )

    with pytest.raises(TraceFetchError):
        await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5))


@pytest.mark.anyio
async def test_trace_fetcher_raises_on_invalid_json():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example", cookie="", transport=transport
    )

    with pytest.raises(TraceFetchError):
        await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5))


@pytest.mark.anyio
@pytest.mark.parametrize(
    "payload",
    [
        {"timestamp": 1704456000, "trace": [["x", 53.42, -6.27, "ground"]]},
        {"timestamp": 1704456000, "trace": [[0, "north", -6.27, "ground"]]},
        {"timestamp": 1704456000, "trace": [[0, 53.42, [1], 3000]]},
        {"timestamp": 1704456000, "trace": [[0, float("nan"), -6.27, 3000]]},
        {"timestamp": True, "trace": [[0, 53.42, -6.27, "ground"]]},
        {"timestamp": float("inf"), "trace": [[0, 53.42, -6.27, "ground"]]},
    ],
)
async def test_trace_fetcher_rejects_malformed_samples(payload):
    def handler(request: httpx.Request):
        return httpx.Response(
            200, content=json.dumps(payload), headers={"content-type": "application/json"}
        )

    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example",
        cookie="",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(TraceFetchError):
        await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5))


@pytest.mark.anyio
async def test_trace_fetcher_wraps_transport_errors():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example",
        cookie="",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(TraceFetchError):
        await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5))


@pytest.mark.anyio
async def test_trace_fetcher_reads_cookie_from_environment(monkeypatch):
    from flights import config

    monkeypatch.setenv("ADSB_COOKIE", "adsbx_sid=env")
    config.get_adsb_cookie.cache_clear()
    seen: dict[str, str] = {}

    def handler(request: httpx.Request):
        seen["cookie"] = request.headers.get("cookie", "")
        return httpx.Response(404)

    fetcher = AdsbExchangeTraceFetcher(
        base_url="https://globe.example", transport=httpx.MockTransport(handler)
    )
    try:
        await fetcher.fetch_day_trace("4ca7b6", date(2024, 1, 5))
    finally:
        config.get_adsb_cookie.cache_clear()

    assert seen["cookie"] == "adsbx_sid=env"
