"""
Request/response shapes of the stock query API.
Field names follow the frontend contract (camelCase).
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from bandarmology.domain.models import StockAnalysis, StockQueryRecord


class StockQueryRequest(BaseModel):
    emiten: Optional[str] = None
    fromDate: Optional[str] = None
    toDate: Optional[str] = None


class StockInput(BaseModel):
    emiten: str
    fromDate: date
    toDate: date


class StockbitData(BaseModel):
    bandar: str
    barangBandar: int
    rataRataBandar: int


class MarketData(BaseModel):
    harga: float
    offerTeratas: float
    bidTerbawah: float
    totalBid: float
    totalOffer: float
    fraksi: int


class Calculated(BaseModel):
    totalPapan: int
    rataRataBidOfer: float
    a: float
    p: float
    targetRealistis1: int
    targetMax: int


class BrokerSummaryData(BaseModel):
    detector: Dict[str, Any]
    topBuyers: List[Dict[str, Any]]
    topSellers: List[Dict[str, Any]]


class StockAnalysisData(BaseModel):
    input: StockInput
    stockbitData: StockbitData
    marketData: MarketData
    calculated: Calculated
    brokerSummary: Optional[BrokerSummaryData]
    sector: Optional[str] = None
    isFromHistory: Optional[bool] = None
    historyDate: Optional[date] = None

    @classmethod
    def from_analysis(cls, analysis: StockAnalysis) -> "StockAnalysisData":
        query = analysis.query
        broker = analysis.broker
        market = analysis.market
        targets = analysis.targets
        summary = analysis.broker_summary

        optional: Dict[str, Any] = {}
        if analysis.sector:
            optional["sector"] = analysis.sector
        if analysis.is_from_history is not None:
            optional["isFromHistory"] = analysis.is_from_history
        if analysis.history_date is not None:
            optional["historyDate"] = analysis.history_date

        return cls(
            input=StockInput(emiten=query.emiten, fromDate=query.from_date, toDate=query.to_date),
            stockbitData=StockbitData(
                bandar=broker.bandar,
                barangBandar=broker.barang_bandar,
                rataRataBandar=broker.rata_rata_bandar,
            ),
            marketData=MarketData(
                harga=market.harga,
                offerTeratas=market.offer_teratas,
                bidTerbawah=market.bid_terbawah,
                totalBid=market.total_bid,
                totalOffer=market.total_offer,
                fraksi=targets.fraksi,
            ),
            calculated=Calculated(
                totalPapan=targets.total_papan,
                rataRataBidOfer=targets.rata_rata_bid_ofer,
                a=targets.a,
                p=targets.p,
                targetRealistis1=targets.target_realistis,
                targetMax=targets.target_max,
            ),
            brokerSummary=(
                BrokerSummaryData(
                    detector=summary.detector,
                    topBuyers=summary.top_buyers,
                    topSellers=summary.top_sellers,
                )
                if summary is not None
                else None
            ),
            **optional,
        )


class StockQueryHistoryItem(BaseModel):
    id: Optional[int]
    emiten: str
    sector: Optional[str]
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

    @classmethod
    def from_record(cls, record: StockQueryRecord) -> "StockQueryHistoryItem":
        return cls(
            id=record.id,
            emiten=record.emiten,
            sector=record.sector,
            from_date=record.from_date,
            to_date=record.to_date,
            bandar=record.bandar,
            barang_bandar=record.barang_bandar,
            rata_rata_bandar=record.rata_rata_bandar,
            harga=record.harga,
            ara=record.ara,
            arb=record.arb,
            fraksi=record.fraksi,
            total_bid=record.total_bid,
            total_offer=record.total_offer,
            total_papan=record.total_papan,
            rata_rata_bid_ofer=record.rata_rata_bid_ofer,
            a=record.a,
            p=record.p,
            target_realistis=record.target_realistis,
            target_max=record.target_max,
        )
