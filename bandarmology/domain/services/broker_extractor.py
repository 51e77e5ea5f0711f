"""
Broker extraction from the Stockbit market detector payload.
"""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from bandarmology.domain.models import (
    BrokerFound,
    BrokerLookup,
    BrokerMetrics,
    BrokerNotFound,
    BrokerSummary,
)
from bandarmology.domain.schemas.stockbit import BrokerBuyRow, MarketDetectorData, MarketDetectorResponse

logger = logging.getLogger(__name__)


def _parse_detector(payload: Any) -> Optional[MarketDetectorData]:
    try:
        return MarketDetectorResponse.model_validate(payload).data
    except ValidationError as exc:
        logger.debug(f"Market detector payload not usable: {exc.error_count()} errors")
        return None


def _buy_rows(data: MarketDetectorData) -> List[BrokerBuyRow]:
    rows = []
    for raw in data.broker_summary.brokers_buy:
        try:
            rows.append(BrokerBuyRow.model_validate(raw))
        except ValidationError:
            continue
    return rows


def get_top_broker(payload: Any) -> BrokerLookup:
    """
    Find the bandar: the buyer with the largest net accumulated lots.

    Ties on lots go to the larger net buy value. An empty or malformed
    payload yields ``BrokerNotFound``.
    """
    data = _parse_detector(payload)
    if data is None:
        return BrokerNotFound(reason="malformed market detector payload")

    rows = _buy_rows(data)
    if not rows:
        return BrokerNotFound()

    top = max(rows, key=lambda row: (row.blot, row.bval))
    return BrokerFound(
        BrokerMetrics(
            bandar=top.netbs_broker_code,
            barang_bandar=int(round(top.blot)),
            rata_rata_bandar=int(round(top.netbs_buy_avg_price)),
        )
    )


def get_broker_summary(payload: Any, limit: int = 4) -> Optional[BrokerSummary]:
    """Top buyers/sellers as ranked by the provider, plus the detector block."""
    data = _parse_detector(payload)
    if data is None:
        return None
    summary = data.broker_summary
    if not summary.brokers_buy and not summary.brokers_sell:
        return None
    return BrokerSummary(
        detector=dict(data.bandar_detector),
        top_buyers=list(summary.brokers_buy[:limit]),
        top_sellers=list(summary.brokers_sell[:limit]),
    )
