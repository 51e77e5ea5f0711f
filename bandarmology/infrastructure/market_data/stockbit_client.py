"""
Stockbit exodus API client.
Market detector (broker summary), orderbook and emiten info feeds.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

import httpx

from bandarmology.domain.exceptions import UpstreamRequestError

logger = logging.getLogger(__name__)


class StockbitClient:
    HEADERS = {
        "Accept": "application/json",
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        "Origin": "https://stockbit.com",
        "Referer": "https://stockbit.com/",
    }

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = (token or "").strip() or None
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = dict(self.HEADERS)
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP session"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request_json(self, endpoint: str, path: str, params: Optional[dict] = None) -> Dict[str, Any]:
        client = self._get_client()
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamRequestError(endpoint, None, str(exc) or exc.__class__.__name__) from exc

        if response.status_code != 200:
            logger.warning(f"Stockbit {endpoint} returned {response.status_code} for {path}")
            raise UpstreamRequestError(endpoint, response.status_code, response.text[:200])
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamRequestError(endpoint, response.status_code, "invalid JSON body") from exc
        if not isinstance(payload, dict):
            raise UpstreamRequestError(endpoint, response.status_code, "unexpected JSON body")
        return payload

    async def fetch_market_detector(self, emiten: str, from_date: date, to_date: date) -> Dict[str, Any]:
        """Net broker summary for the regular board over the period."""
        params = {
            "from": from_date.isoformat(),
            "to": to_date.isoformat(),
            "transaction_type": "TRANSACTION_TYPE_NET",
            "market_board": "MARKET_BOARD_REGULER",
            "investor_type": "INVESTOR_TYPE_ALL",
            "limit": 25,
        }
        return await self._request_json("market detector", f"/marketdetectors/{emiten}", params=params)

    async def fetch_orderbook(self, emiten: str) -> Dict[str, Any]:
        """Live orderbook snapshot."""
        return await self._request_json(
            "orderbook", f"/company-price-feed/v2/orderbook/companies/{emiten}"
        )

    async def fetch_emiten_info(self, emiten: str) -> Dict[str, Any]:
        """Company profile (sector)."""
        return await self._request_json("emiten info", f"/emitten/{emiten}/info")
