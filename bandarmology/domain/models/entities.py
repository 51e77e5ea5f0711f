"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class DataSource(str, Enum):
    """Provenance of a market snapshot"""
    LIVE = "live"
    HISTORY = "history"


@dataclass(frozen=True)
class MarketQuery:
    """Request-scoped query for one emiten over a date range"""
    emiten: str
    from_date: date
    to_date: date

    @property
    def is_single_date(self) -> bool:
        return self.from_date == self.to_date


@dataclass(frozen=True)
class BrokerMetrics:
    """Accumulation metrics of the dominant broker (bandar)"""
    bandar: str
    barang_bandar: int
    rata_rata_bandar: int


@dataclass(frozen=True)
class BrokerFound:
    metrics: BrokerMetrics


@dataclass(frozen=True)
class BrokerNotFound:
    """No active broker rows for the period (market closed, inactive emiten)"""
    reason: str = "no broker rows"


BrokerLookup = Union[BrokerFound, BrokerNotFound]


@dataclass(frozen=True)
class BrokerSummary:
    """Ranked buyers/sellers for the period, passed through for display"""
    detector: Dict[str, Any]
    top_buyers: List[Dict[str, Any]]
    top_sellers: List[Dict[str, Any]]


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Canonical market state used by the target calculator.

    offer_teratas / bid_terbawah are the outer edges of the visible book.
    """
    harga: float
    offer_teratas: float
    bid_terbawah: float
    total_bid: float
    total_offer: float
    source: DataSource = DataSource.LIVE


@dataclass(frozen=True)
class TargetMetrics:
    fraksi: int
    total_papan: int
    rata_rata_bid_ofer: float
    a: float
    p: float
    target_realistis: int
    target_max: int


@dataclass(frozen=True)
class StockQueryRecord:
    """Flattened persisted result of a single-date query - AUDIT RECORD"""
    emiten: str
    from_date: date
    to_date: date
    bandar: str
    barang_bandar: int
    rata_rata_bandar: int
    harga: float
    ara: float
    arb: float
    fraksi: int
    total_bid: float
    total_offer: float
    total_papan: int
    rata_rata_bid_ofer: float
    a: float
    p: float
    target_realistis: int
    target_max: int
    sector: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def broker_metrics(self) -> BrokerMetrics:
        return BrokerMetrics(
            bandar=self.bandar,
            barang_bandar=int(self.barang_bandar),
            rata_rata_bandar=int(self.rata_rata_bandar),
        )

    def market_snapshot(self) -> MarketSnapshot:
        return MarketSnapshot(
            harga=float(self.harga),
            offer_teratas=float(self.ara),
            bid_terbawah=float(self.arb),
            total_bid=float(self.total_bid),
            total_offer=float(self.total_offer),
            source=DataSource.HISTORY,
        )

    @classmethod
    def from_analysis(cls, analysis: "StockAnalysis") -> "StockQueryRecord":
        broker = analysis.broker
        market = analysis.market
        targets = analysis.targets
        return cls(
            emiten=analysis.query.emiten,
            sector=analysis.sector,
            from_date=analysis.query.from_date,
            to_date=analysis.query.to_date,
            bandar=broker.bandar,
            barang_bandar=broker.barang_bandar,
            rata_rata_bandar=broker.rata_rata_bandar,
            harga=market.harga,
            ara=market.offer_teratas,
            arb=market.bid_terbawah,
            fraksi=targets.fraksi,
            total_bid=market.total_bid,
            total_offer=market.total_offer,
            total_papan=targets.total_papan,
            rata_rata_bid_ofer=targets.rata_rata_bid_ofer,
            a=targets.a,
            p=targets.p,
            target_realistis=targets.target_realistis,
            target_max=targets.target_max,
        )


@dataclass(frozen=True)
class StockAnalysis:
    """One analytics record: the outcome of a MarketQuery"""
    query: MarketQuery
    broker: BrokerMetrics
    market: MarketSnapshot
    targets: TargetMetrics
    broker_summary: Optional[BrokerSummary] = None
    sector: Optional[str] = None
    is_from_history: Optional[bool] = None
    history_date: Optional[date] = None
