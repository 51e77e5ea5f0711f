"""
Orderbook normalization: Stockbit orderbook payload -> MarketSnapshot.
"""

import logging
import math
import re
from typing import Any

from pydantic import ValidationError

from bandarmology.domain.exceptions import OrderbookStructureError
from bandarmology.domain.models import DataSource, MarketSnapshot
from bandarmology.domain.schemas.stockbit import OrderbookData

logger = logging.getLogger(__name__)


# Indonesian-style grouping: "1.500.000"
DOT_GROUPED_LOT = re.compile(r"^\d{1,3}(\.\d{3})+$")


def parse_lot(value: Any) -> float:
    """
    Parse a lot figure such as ``"1,234,500"``, ``"1.234.500"`` or ``12.5``.

    Missing or negative values count as zero lots.

    Raises:
        OrderbookStructureError: the value is present but not a number
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).replace(",", "").replace(" ", "").strip()
        if not text:
            return 0.0
        if DOT_GROUPED_LOT.match(text):
            text = text.replace(".", "")
        try:
            number = float(text)
        except ValueError as exc:
            logger.error(f"Unparseable orderbook lot value: {value!r}")
            raise OrderbookStructureError() from exc
    if math.isnan(number) or number < 0:
        return 0.0
    return number


def normalize_orderbook(payload: Any) -> MarketSnapshot:
    """
    Build the live market snapshot from an orderbook response.

    Raises:
        OrderbookStructureError: ``close`` or ``total_bid_offer`` is missing
    """
    body = payload.get("data") if isinstance(payload, dict) and isinstance(payload.get("data"), dict) else payload
    if not isinstance(body, dict) or not body.get("total_bid_offer") or body.get("close") is None:
        raise OrderbookStructureError()

    try:
        book = OrderbookData.model_validate(body)
    except ValidationError as exc:
        logger.error(f"Orderbook payload failed validation: {exc}")
        raise OrderbookStructureError() from exc

    offer_prices = [level.price for level in book.offer]
    bid_prices = [level.price for level in book.bid]

    offer_teratas = max(offer_prices) if offer_prices else float(book.high or 0)
    bid_terbawah = min(bid_prices) if bid_prices else 0.0

    return MarketSnapshot(
        harga=float(book.close),
        offer_teratas=float(offer_teratas),
        bid_terbawah=float(bid_terbawah),
        total_bid=parse_lot(book.total_bid_offer.bid.lot),
        total_offer=parse_lot(book.total_bid_offer.offer.lot),
        source=DataSource.LIVE,
    )
