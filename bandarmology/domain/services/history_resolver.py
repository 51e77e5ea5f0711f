"""
History resolution: when to trust the persisted query history over live feeds.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol

from bandarmology.domain.exceptions import NoBrokerDataError
from bandarmology.domain.models import MarketQuery, MarketSnapshot, StockAnalysis, StockQueryRecord
from bandarmology.domain.services.target_calculator import calculate_for

logger = logging.getLogger(__name__)


class HistoryStore(Protocol):
    async def get_latest(self, emiten: str) -> Optional[StockQueryRecord]:
        ...

    async def get_by_date(self, emiten: str, target_date: date) -> Optional[StockQueryRecord]:
        ...


class HistoryResolver:
    def __init__(self, store: HistoryStore):
        self.store = store

    async def fallback_analysis(self, query: MarketQuery) -> StockAnalysis:
        """
        Serve the latest persisted record when no live bandar was found.

        Raises:
            NoBrokerDataError: nothing persisted for the emiten either
        """
        record = await self.store.get_latest(query.emiten)
        if record is None:
            logger.info(f"No broker data and no history for {query.emiten}")
            raise NoBrokerDataError(query.emiten)

        broker = record.broker_metrics()
        market = record.market_snapshot()
        is_from_history = (
            record.from_date != query.from_date or record.to_date != query.to_date
        )
        logger.info(
            f"Serving {query.emiten} from history {record.from_date}..{record.to_date} "
            f"(requested {query.from_date}..{query.to_date})"
        )
        return StockAnalysis(
            query=MarketQuery(query.emiten, record.from_date, record.to_date),
            broker=broker,
            market=market,
            targets=calculate_for(broker, market),
            broker_summary=None,
            sector=record.sector,
            is_from_history=is_from_history,
            history_date=record.from_date,
        )

    async def resolve_market(
        self,
        query: MarketQuery,
        live: MarketSnapshot,
        today: date
    ) -> MarketSnapshot:
        """
        Past dates take the stored snapshot for ``to_date`` when one exists;
        otherwise the live orderbook snapshot stands.
        """
        if query.to_date == today:
            return live

        record = await self.store.get_by_date(query.emiten, query.to_date)
        if record is None:
            logger.debug(f"No stored price for {query.emiten} on {query.to_date}; keeping live orderbook")
            return live
        return record.market_snapshot()
