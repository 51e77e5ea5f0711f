"""
STOCK QUERY SERVICE
Live feeds + query history -> one analytics record

FLOW:
1. Fetch market detector, orderbook and emiten info concurrently
2. No live bandar -> latest history record (or NoBrokerDataError)
3. Past to_date -> stored snapshot overrides the live orderbook
4. Calculate targets
5. Single-date queries -> write-behind persistence (not awaited)
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, Optional

from bandarmology.background.persistence_queue import PersistenceQueue
from bandarmology.domain.models import BrokerNotFound, MarketQuery, StockAnalysis, StockQueryRecord
from bandarmology.domain.schemas.stockbit import EmitenInfoResponse
from bandarmology.domain.services.broker_extractor import get_broker_summary, get_top_broker
from bandarmology.domain.services.history_resolver import HistoryResolver
from bandarmology.domain.services.orderbook_normalizer import normalize_orderbook
from bandarmology.domain.services.target_calculator import calculate_for
from bandarmology.infrastructure.market_data.types import BrokerFeed
from bandarmology.utils.time import today_wib

logger = logging.getLogger(__name__)


class StockQueryService:
    def __init__(
        self,
        feed: BrokerFeed,
        history: HistoryResolver,
        persistence: Optional[PersistenceQueue] = None,
        summary_limit: int = 4,
        today: Callable[[], date] = today_wib,
    ):
        self.feed = feed
        self.history = history
        self.persistence = persistence
        self.summary_limit = summary_limit
        self._today = today

    async def _fetch_sector(self, emiten: str) -> Optional[str]:
        """Sector is cosmetic: any failure just leaves it unset."""
        try:
            payload = await self.feed.fetch_emiten_info(emiten)
            return EmitenInfoResponse.model_validate(payload).data.sector or None
        except Exception as exc:
            logger.debug(f"Emiten info unavailable for {emiten}: {exc}")
            return None

    async def run(self, query: MarketQuery) -> StockAnalysis:
        detector_payload, orderbook_payload, sector = await asyncio.gather(
            self.feed.fetch_market_detector(query.emiten, query.from_date, query.to_date),
            self.feed.fetch_orderbook(query.emiten),
            self._fetch_sector(query.emiten),
        )

        lookup = get_top_broker(detector_payload)
        if isinstance(lookup, BrokerNotFound):
            logger.info(f"No live bandar for {query.emiten} ({lookup.reason})")
            return await self.history.fallback_analysis(query)

        broker = lookup.metrics
        broker_summary = get_broker_summary(detector_payload, limit=self.summary_limit)

        live_market = normalize_orderbook(orderbook_payload)
        market = await self.history.resolve_market(query, live_market, self._today())

        analysis = StockAnalysis(
            query=query,
            broker=broker,
            market=market,
            targets=calculate_for(broker, market),
            broker_summary=broker_summary,
            sector=sector,
        )

        if query.is_single_date:
            self._persist(analysis)

        return analysis

    def _persist(self, analysis: StockAnalysis) -> None:
        if self.persistence is None:
            logger.debug("No persistence queue configured; skipping history write")
            return
        self.persistence.submit(StockQueryRecord.from_analysis(analysis))
