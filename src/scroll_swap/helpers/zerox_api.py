"""
Thin client for the 0x Swap API (Permit2 flow).

Endpoints
---------
GET /swap/v1/sources        liquidity venues available on a chain
GET /swap/permit2/price     indicative price, reports allowance issues
GET /swap/permit2/quote     firm quote with transaction + permit2 payload

Every request carries the JSON content type, ``0x-api-key`` and
``0x-version`` headers. Non-2xx answers, undecodable bodies and transport
errors all surface as UpstreamAPIError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from ..config.network import (
    HTTP_TIMEOUT,
    PRICE_PATH,
    QUOTE_PATH,
    SOURCES_PATH,
    ZERO_EX_API_URL,
    ZERO_EX_API_VERSION,
)
from ..config.settings import Settings
from ..errors import UpstreamAPIError
from .zerox_models import PriceResponse, QuoteResponse, SourcesResponse

__all__ = ["SwapParams", "ZeroExClient"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapParams:
    """Query parameters shared by the price and quote calls."""

    chain_id: int
    sell_token: str
    buy_token: str
    sell_amount: int
    taker: str
    affiliate_fee_bps: int = 100
    surplus_collection: bool = True

    def to_query(self) -> dict[str, str]:
        return {
            "chainId": str(self.chain_id),
            "sellToken": self.sell_token,
            "buyToken": self.buy_token,
            "sellAmount": str(self.sell_amount),
            "taker": self.taker,
            "affiliateFee": str(self.affiliate_fee_bps),
            "surplusCollection": "true" if self.surplus_collection else "false",
        }


class ZeroExClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = ZERO_EX_API_URL,
        timeout: float = HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Content-Type": "application/json",
            "0x-api-key": api_key,
            "0x-version": ZERO_EX_API_VERSION,
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "ZeroExClient":
        return cls(
            api_key=settings.zero_ex_api_key,
            base_url=settings.zero_ex_api_url,
            timeout=settings.http_timeout,
        )

    # ---------- transport ----------

    def _get(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise UpstreamAPIError(f"request failed: {exc}", endpoint=path) from exc

        logger.debug("Status Code: %s", response.status_code)
        if not response.ok:
            raise UpstreamAPIError(response.text[:500], endpoint=path, status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            raise UpstreamAPIError("response body is not valid JSON", endpoint=path, status_code=response.status_code) from None

    # ---------- endpoints ----------

    def get_sources(self, chain_id: int) -> SourcesResponse:
        body = self._get(SOURCES_PATH, {"chainId": str(chain_id)})
        return SourcesResponse.from_dict(body, SOURCES_PATH)

    def get_price(self, params: SwapParams) -> PriceResponse:
        body = self._get(PRICE_PATH, params.to_query())
        return PriceResponse.from_dict(body, PRICE_PATH)

    def get_quote(self, params: SwapParams) -> QuoteResponse:
        body = self._get(QUOTE_PATH, params.to_query())
        return QuoteResponse.from_dict(body, QUOTE_PATH)
