"""
Unit Tests for the Target Calculator
"""

import pytest

from bandarmology.domain.models import BrokerMetrics, MarketSnapshot
from bandarmology.domain.services.target_calculator import (
    calculate_for,
    calculate_targets,
    count_papan,
    get_fraksi,
)


class TestFraksi:
    """IDX tick-size bands"""

    @pytest.mark.parametrize(
        "harga,expected",
        [
            (50, 1),
            (199, 1),
            (200, 2),
            (499, 2),
            (500, 5),
            (1995, 5),
            (2000, 10),
            (4990, 10),
            (5000, 25),
            (9150, 25),
        ],
    )
    def test_band_edges(self, harga, expected):
        assert get_fraksi(harga) == expected


class TestCountPapan:
    def test_whole_steps_only(self):
        assert count_papan(9180, 9100, 25) == 3

    def test_exact_multiple(self):
        assert count_papan(1050, 1000, 5) == 10

    def test_inverted_book_is_zero(self):
        assert count_papan(100, 120, 1) == 0

    @pytest.mark.parametrize(
        "offer,bid,fraksi",
        [(9180, 9100, 25), (505, 480, 2), (150, 0, 1), (2010, 1990, 10), (300, 300, 2)],
    )
    def test_matches_integer_division_of_spread(self, offer, bid, fraksi):
        papan = count_papan(offer, bid, fraksi)
        assert papan >= 0
        assert papan == (offer - bid) // fraksi


class TestCalculateTargets:
    def test_bbca_example(self):
        result = calculate_targets(
            rata_rata_bandar=9000,
            barang_bandar=500000,
            offer_teratas=9180,
            bid_terbawah=9100,
            total_bid=15000,
            total_offer=9000,
            harga=9150,
        )
        assert result.fraksi == 25
        assert result.total_papan == 3
        assert result.rata_rata_bid_ofer == 8000.0
        assert result.a == 450.0
        assert result.p == 62.5
        # 9000 + 450 + 31.25 * 25
        assert result.target_realistis == 10231
        # 9000 + 450 + 62.5 * 25 = 11012.5, rounded half up
        assert result.target_max == 11013

    def test_zero_papan_does_not_divide_by_zero(self):
        result = calculate_targets(1000, 5000, 1000, 1000, 10, 10, 1000)
        assert result.total_papan == 0
        assert result.rata_rata_bid_ofer == 0.0
        assert result.p == 0.0
        assert result.target_realistis == 1050
        assert result.target_max == 1050

    def test_empty_book_volume(self):
        result = calculate_targets(100, 5000, 110, 90, 0, 0, 100)
        assert result.total_papan == 20
        assert result.p == 0.0
        assert result.target_max == 105

    def test_deterministic(self):
        args = (4512, 123456, 4700, 4380, 3456.78, 2345.67, 4520)
        assert calculate_targets(*args) == calculate_targets(*args)

    def test_max_target_not_below_realistic(self):
        result = calculate_targets(450, 80000, 520, 400, 900, 1100, 470)
        assert result.target_max >= result.target_realistis


def test_calculate_for_scales_book_volume_to_hundreds_of_lots():
    broker = BrokerMetrics(bandar="BK", barang_bandar=500000, rata_rata_bandar=9000)
    market = MarketSnapshot(
        harga=9150,
        offer_teratas=9180,
        bid_terbawah=9100,
        total_bid=1_500_000,
        total_offer=900_000,
    )
    direct = calculate_targets(9000, 500000, 9180, 9100, 15000, 9000, 9150)
    assert calculate_for(broker, market) == direct
