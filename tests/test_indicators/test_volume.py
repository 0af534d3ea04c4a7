"""Tests for volume averages, price deltas and percentage changes."""

from decimal import Decimal

import pytest

from market.indicators.volume import (
    compute_percentage_change,
    compute_price_delta,
    compute_volume_average,
)


class TestComputeVolumeAverage:
    """Tests for compute_volume_average."""

    def test_empty_series(self) -> None:
        assert compute_volume_average([], period=20) == (Decimal("0"), Decimal("0"))

    def test_fewer_candles_than_period_averages_all(self, make_candles) -> None:
        candles = make_candles([100, 100, 100], volumes=[1, 2, 3])
        current, average = compute_volume_average(candles, period=20)
        assert current == Decimal("3")
        assert average == Decimal("2")

    def test_uses_last_period_candles(self, make_candles) -> None:
        """Volumes 1..25 with period 20 average 6..25 = 15.5."""
        volumes = list(range(1, 26))
        candles = make_candles([100] * 25, volumes=volumes)
        current, average = compute_volume_average(candles, period=20)
        assert current == Decimal("25")
        assert average == Decimal("15.5")


class TestComputePriceDelta:
    """Tests for compute_price_delta."""

    def test_known_delta(self, make_candles) -> None:
        candles = make_candles([100, 105, 103])
        assert compute_price_delta(candles, bars_back=2) == Decimal("3")
        assert compute_price_delta(candles, bars_back=1) == Decimal("-2")

    @pytest.mark.parametrize("bars_back", [3, 4, 0, -1])
    def test_out_of_range_returns_zero(self, make_candles, bars_back: int) -> None:
        candles = make_candles([100, 105, 103])
        assert compute_price_delta(candles, bars_back=bars_back) == Decimal("0")


class TestComputePercentageChange:
    """Tests for compute_percentage_change."""

    def test_known_change(self, make_candles) -> None:
        candles = make_candles([100, 110])
        assert compute_percentage_change(candles, bars_back=1) == Decimal("10")

    def test_negative_change(self, make_candles) -> None:
        candles = make_candles([200, 150, 150])
        assert compute_percentage_change(candles, bars_back=2) == Decimal("-25")

    @pytest.mark.parametrize("bars_back", [2, 5, 0, -3])
    def test_out_of_range_returns_zero(self, make_candles, bars_back: int) -> None:
        candles = make_candles([100, 110])
        assert compute_percentage_change(candles, bars_back=bars_back) == Decimal("0")

    def test_zero_reference_returns_zero(self, make_candles) -> None:
        candles = make_candles([0, 110])
        assert compute_percentage_change(candles, bars_back=1) == Decimal("0")

    def test_empty_series(self) -> None:
        assert compute_percentage_change([], bars_back=1) == Decimal("0")
