"""
Stockbit payload schemas.

The exodus API returns loosely typed JSON: numbers arrive as strings, lists
may be null, and the orderbook is sometimes wrapped in ``data`` and sometimes
not. These models pin down the fields the pipeline reads and nothing else.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _to_number(value: Any) -> Any:
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        return cleaned or None
    return value


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class BrokerBuyRow(BaseModel):
    model_config = ConfigDict(extra="allow")

    netbs_broker_code: str
    blot: float = 0
    bval: float = 0
    netbs_buy_avg_price: float = 0

    @field_validator("blot", "bval", "netbs_buy_avg_price", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _to_number(value)


class BrokerSummaryBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    brokers_buy: List[Dict[str, Any]] = []
    brokers_sell: List[Dict[str, Any]] = []

    @field_validator("brokers_buy", "brokers_sell", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _none_to_list(value)


class MarketDetectorData(BaseModel):
    model_config = ConfigDict(extra="allow")

    broker_summary: BrokerSummaryBlock
    bandar_detector: Dict[str, Any] = {}

    @field_validator("bandar_detector", mode="before")
    @classmethod
    def coerce_detector(cls, value: Any) -> Any:
        return {} if value is None else value


class MarketDetectorResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: MarketDetectorData


class OrderbookLevel(BaseModel):
    model_config = ConfigDict(extra="allow")

    price: float

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, value: Any) -> Any:
        return _to_number(value)


class LotVolume(BaseModel):
    model_config = ConfigDict(extra="allow")

    lot: Any = None


class TotalBidOffer(BaseModel):
    model_config = ConfigDict(extra="allow")

    bid: LotVolume = LotVolume()
    offer: LotVolume = LotVolume()


class OrderbookData(BaseModel):
    model_config = ConfigDict(extra="allow")

    close: float
    high: Optional[float] = None
    total_bid_offer: TotalBidOffer
    bid: List[OrderbookLevel] = []
    offer: List[OrderbookLevel] = []

    @field_validator("close", "high", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _to_number(value)

    @field_validator("bid", "offer", mode="before")
    @classmethod
    def coerce_levels(cls, value: Any) -> Any:
        return _none_to_list(value)


class EmitenInfoData(BaseModel):
    model_config = ConfigDict(extra="allow")

    sector: Optional[str] = None


class EmitenInfoResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: EmitenInfoData = EmitenInfoData()
