"""Tests for the concurrent NAV fetch."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from rabbit_invest.models.fund import NAVResponse
from rabbit_invest.services.mfapi import DecodeFailure, TransportFailure
from rabbit_invest.services.nav_aggregator import NavAggregator


def make_nav(code: int, navs=("10.0", "9.5")) -> NAVResponse:
    return NAVResponse.model_validate(
        {
            "meta": {
                "fund_house": "Test Mutual Fund",
                "scheme_type": "Open Ended Schemes",
                "scheme_category": "Equity Scheme",
                "scheme_code": code,
                "scheme_name": f"Test Fund {code}",
            },
            "data": [
                {"date": f"{14 - i:02d}-02-2026", "nav": nav} for i, nav in enumerate(navs)
            ],
            "status": "SUCCESS",
        }
    )


@pytest.mark.asyncio
async def test_failed_code_is_dropped():
    async def fetch(code):
        if code == "999999999":
            raise DecodeFailure("empty meta")
        return make_nav(int(code))

    gateway = AsyncMock()
    gateway.fetch_nav_history.side_effect = fetch

    result = await NavAggregator(gateway).fetch_many(["120503", "999999999"])
    assert list(result) == ["120503"]
    assert result["120503"].meta.scheme_code == 120503


@pytest.mark.asyncio
async def test_all_failures_give_empty_map():
    gateway = AsyncMock()
    gateway.fetch_nav_history.side_effect = TransportFailure("offline")

    assert await NavAggregator(gateway).fetch_many(["1", "2"]) == {}


@pytest.mark.asyncio
async def test_empty_codes_make_no_requests():
    gateway = AsyncMock()
    assert await NavAggregator(gateway).fetch_many([]) == {}
    gateway.fetch_nav_history.assert_not_called()


@pytest.mark.asyncio
async def test_duplicate_codes_fetched_once():
    gateway = AsyncMock()
    gateway.fetch_nav_history.side_effect = lambda code: make_nav(int(code))

    result = await NavAggregator(gateway).fetch_many(["1", "1", "2"])
    assert sorted(result) == ["1", "2"]
    assert gateway.fetch_nav_history.await_count == 2


@pytest.mark.asyncio
async def test_requests_run_concurrently():
    in_flight = 0
    peak = 0

    async def fetch(code):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return make_nav(int(code))

    gateway = AsyncMock()
    gateway.fetch_nav_history.side_effect = fetch

    result = await NavAggregator(gateway).fetch_many(["1", "2", "3", "4"])
    assert len(result) == 4
    assert peak == 4


@pytest.mark.asyncio
async def test_unexpected_errors_propagate():
    gateway = AsyncMock()
    gateway.fetch_nav_history.side_effect = RuntimeError("bug")

    with pytest.raises(RuntimeError):
        await NavAggregator(gateway).fetch_many(["1"])
