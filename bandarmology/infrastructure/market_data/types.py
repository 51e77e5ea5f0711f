"""
Broker feed protocol for type hints.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Protocol


class BrokerFeed(Protocol):
    async def fetch_market_detector(self, emiten: str, from_date: date, to_date: date) -> Dict[str, Any]:
        ...

    async def fetch_orderbook(self, emiten: str) -> Dict[str, Any]:
        ...

    async def fetch_emiten_info(self, emiten: str) -> Dict[str, Any]:
        ...
