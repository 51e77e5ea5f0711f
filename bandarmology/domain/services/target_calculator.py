"""
TARGET CALCULATOR
Bandarmology price objectives from broker accumulation + order book depth

RESPONSIBILITIES:
- Resolve the IDX tick size (fraksi) for a price
- Count the boards (papan) between the lowest bid and highest offer
- Project the bandar's average price forward into two targets

RULES (LOCKED):
❌ No I/O
❌ No clock or randomness
✅ Same inputs -> same outputs, always
"""

import math

from bandarmology.domain.models import BrokerMetrics, MarketSnapshot, TargetMetrics

# IDX tick-size bands: (upper bound exclusive, fraksi)
FRAKSI_TABLE = (
    (200, 1),
    (500, 2),
    (2000, 5),
    (5000, 10),
)
FRAKSI_MAX = 25

# Bandar mark-up over his average accumulation price
MARKUP_RATIO = 0.05


def get_fraksi(harga: float) -> int:
    """Return the tick size applicable at ``harga``."""
    for upper, fraksi in FRAKSI_TABLE:
        if harga < upper:
            return fraksi
    return FRAKSI_MAX


def count_papan(offer_teratas: float, bid_terbawah: float, fraksi: int) -> int:
    """Number of whole price steps between the book extremes (never negative)."""
    spread = offer_teratas - bid_terbawah
    if spread <= 0 or fraksi <= 0:
        return 0
    return int(math.floor(spread / fraksi))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_targets(
    rata_rata_bandar: float,
    barang_bandar: float,
    offer_teratas: float,
    bid_terbawah: float,
    total_bid: float,
    total_offer: float,
    harga: float,
) -> TargetMetrics:
    """
    Calculate bandarmology targets

    Args:
        rata_rata_bandar: Bandar's average accumulation price
        barang_bandar: Lots accumulated by the bandar
        offer_teratas: Highest offer price in the book
        bid_terbawah: Lowest bid price in the book
        total_bid: Total bid volume (hundreds of lots)
        total_offer: Total offer volume (hundreds of lots)
        harga: Last price

    Returns:
        TargetMetrics
    """
    fraksi = get_fraksi(harga)
    total_papan = count_papan(offer_teratas, bid_terbawah, fraksi)

    rata_rata_bid_ofer = (total_bid + total_offer) / total_papan if total_papan > 0 else 0.0
    a = rata_rata_bandar * MARKUP_RATIO
    p = barang_bandar / rata_rata_bid_ofer if rata_rata_bid_ofer > 0 else 0.0

    target_realistis = rata_rata_bandar + a + (p / 2) * fraksi
    target_max = rata_rata_bandar + a + p * fraksi

    return TargetMetrics(
        fraksi=fraksi,
        total_papan=total_papan,
        rata_rata_bid_ofer=round(rata_rata_bid_ofer, 2),
        a=round(a, 2),
        p=round(p, 2),
        target_realistis=_round_half_up(target_realistis),
        target_max=_round_half_up(target_max),
    )


def calculate_for(broker: BrokerMetrics, market: MarketSnapshot) -> TargetMetrics:
    """
    Targets for a (broker, market) pair.

    Book volumes are kept in lots on the snapshot and fed to the formula in
    hundreds of lots.
    """
    return calculate_targets(
        broker.rata_rata_bandar,
        broker.barang_bandar,
        market.offer_teratas,
        market.bid_terbawah,
        market.total_bid / 100,
        market.total_offer / 100,
        market.harga,
    )
