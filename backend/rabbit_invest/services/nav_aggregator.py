"""Concurrent NAV history fetch for a batch of scheme codes."""

import asyncio
import logging

from rabbit_invest.models.fund import NAVResponse
from rabbit_invest.services.mfapi import GatewayError, MFAPIClient

logger = logging.getLogger(__name__)


class NavAggregator:
    """Fans out one NAV request per scheme code and keeps the successes."""

    def __init__(self, gateway: MFAPIClient):
        self._gateway = gateway

    async def _fetch_one(
        self, scheme_code: str
    ) -> tuple[str, NAVResponse | None]:
        try:
            return scheme_code, await self._gateway.fetch_nav_history(scheme_code)
        except GatewayError as e:
            logger.warning(f"Dropping NAV history for scheme {scheme_code}: {e}")
            return scheme_code, None

    async def fetch_many(self, scheme_codes: list[str]) -> dict[str, NAVResponse]:
        """Return {scheme_code: NAVResponse} for every code that fetched cleanly.

        A failed code is simply absent; callers treat a missing key as
        "no data available".
        """
        codes = list(dict.fromkeys(str(code) for code in scheme_codes))
        if not codes:
            return {}

        results = await asyncio.gather(*(self._fetch_one(code) for code in codes))
        nav_map = {code: resp for code, resp in results if resp is not None}
        logger.info(f"Received NAV data for {len(nav_map)}/{len(codes)} schemes")
        return nav_map
