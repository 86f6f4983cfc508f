"""Remote data gateway for the public mfapi.in REST API."""

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from rabbit_invest.config import HTTP_TIMEOUT, MFAPI_BASE_URL
from rabbit_invest.models.fund import Fund, NAVResponse

logger = logging.getLogger(__name__)

_fund_list_adapter = TypeAdapter(list[Fund])


class GatewayError(Exception):
    """Base class for failures talking to mfapi.in."""

    message = "Something went wrong while contacting the fund data service"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidAddress(GatewayError):
    message = "Invalid URL"


class TransportFailure(GatewayError):
    message = "Network error, please check your connection and try again"


class DecodeFailure(GatewayError):
    message = "Failed to decode data"


def create_http_client(
    base_url: str = MFAPI_BASE_URL, timeout: float = HTTP_TIMEOUT
) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=timeout)


class MFAPIClient:
    """Read-only access to the fund list and per-scheme NAV history."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _get_json(self, path: str):
        try:
            resp = await self._client.get(path)
            resp.raise_for_status()
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidAddress(str(e)) from e
        except httpx.HTTPError as e:
            raise TransportFailure(str(e)) from e
        try:
            return resp.json()
        except ValueError as e:
            raise DecodeFailure(str(e)) from e

    async def fetch_all_funds(self) -> list[Fund]:
        """GET /mf -> every scheme known to the data source."""
        data = await self._get_json("/mf")
        try:
            funds = _fund_list_adapter.validate_python(data)
        except ValidationError as e:
            raise DecodeFailure(str(e)) from e
        logger.info(f"Received {len(funds)} funds from mfapi")
        return funds

    async def fetch_nav_history(self, scheme_code: str) -> NAVResponse:
        """GET /mf/{scheme_code} -> scheme meta plus NAV points, newest first."""
        scheme_code = str(scheme_code).strip()
        if not scheme_code or "/" in scheme_code:
            raise InvalidAddress(f"Invalid scheme code: {scheme_code!r}")

        data = await self._get_json(f"/mf/{scheme_code}")
        try:
            response = NAVResponse.model_validate(data)
        except ValidationError as e:
            logger.error(f"Decoding error for scheme {scheme_code}: {e}")
            raise DecodeFailure(str(e)) from e
        logger.info(
            f"Decoded NAV response for scheme {scheme_code}: "
            f"{len(response.data)} data points"
        )
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
